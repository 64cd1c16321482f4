"""Access context for request authorization."""

from dataclasses import dataclass

from neocrm.core.exceptions import ForbiddenException, TenantNotSelected
from neocrm.core.permissions import RoleAuthority
from neocrm.core.tenant_scope import TenantScope
from neocrm.models.profile import Profile
from neocrm.models.role import Permission, UserRole


@dataclass
class AccessContext:
    """
    Everything a service needs to authorize a call.

    Built per request by the dependency layer and passed explicitly to
    services, so no module reads a global current user or tenant.

    Attributes:
        profile: The authenticated user's profile
        authority: Role/permission tables in effect
        scope: The user's session tenant scope
    """

    profile: Profile
    authority: RoleAuthority
    scope: TenantScope

    @property
    def role(self) -> UserRole | None:
        return self.authority.resolve(self.profile.role)

    @property
    def tenant_id(self) -> str | None:
        return self.scope.get()

    def require_tenant(self) -> str:
        """
        Get the current tenant id.

        Raises:
            TenantNotSelected: If no tenant is selected
        """
        tenant_id = self.scope.get()
        if tenant_id is None:
            raise TenantNotSelected("Select a cliente first")
        return tenant_id

    def has_permission(self, permission: Permission) -> bool:
        return self.authority.has_permission(self.profile.role, permission)

    def require_permission(self, permission: Permission) -> None:
        """
        Raises:
            ForbiddenException: If the profile's role lacks the permission
        """
        if not self.has_permission(permission):
            raise ForbiddenException(f"Missing permission {permission.value}")

    def is_at_least(self, target: UserRole) -> bool:
        return self.authority.is_at_least(self.profile.role, target)

    def is_super_admin(self) -> bool:
        return self.authority.is_exactly(self.profile.role, UserRole.SUPER_ADMIN)

    def __repr__(self) -> str:
        return (
            f"<AccessContext(user_id={self.profile.id}, tenant_id={self.scope.get()}, "
            f"role={self.profile.role})>"
        )
