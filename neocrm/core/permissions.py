"""
Role hierarchy and per-role permission tables.

RoleAuthority is the single place that answers "can this role do X".
Every query is a total function: absent or malformed roles fail closed
(lowest rank, empty permission set) and are logged instead of raised.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from neocrm.core.exceptions import UnknownRole
from neocrm.models.role import Permission, UserRole

logger = logging.getLogger(__name__)

# Strictly increasing with seniority
ROLE_HIERARCHY: dict[UserRole, int] = {
    UserRole.SUPER_ADMIN: 6,
    UserRole.ADMIN: 5,
    UserRole.MANAGER: 4,
    UserRole.SALESPERSON: 3,
    UserRole.MEMBER: 2,
    UserRole.VIEWER: 1,
}

# Declared per role, not derived from rank: MANAGER has no LEADS_DELETE.
ROLE_PERMISSIONS: dict[UserRole, tuple[Permission, ...]] = {
    UserRole.SUPER_ADMIN: (
        Permission.LEADS_VIEW_ALL,
        Permission.LEADS_VIEW_ASSIGNED,
        Permission.LEADS_CREATE,
        Permission.LEADS_EDIT,
        Permission.LEADS_DELETE,
        Permission.LEADS_ASSIGN,
        Permission.LEADS_TRANSFER,
        Permission.REPORTS_VIEW,
        Permission.REPORTS_EXPORT,
        Permission.SETTINGS_VIEW,
        Permission.SETTINGS_MANAGE,
        Permission.USERS_VIEW,
        Permission.USERS_MANAGE,
    ),
    UserRole.ADMIN: (
        Permission.LEADS_VIEW_ALL,
        Permission.LEADS_VIEW_ASSIGNED,
        Permission.LEADS_CREATE,
        Permission.LEADS_EDIT,
        Permission.LEADS_DELETE,
        Permission.LEADS_ASSIGN,
        Permission.LEADS_TRANSFER,
        Permission.REPORTS_VIEW,
        Permission.REPORTS_EXPORT,
        Permission.SETTINGS_VIEW,
        Permission.SETTINGS_MANAGE,
        Permission.USERS_VIEW,
        Permission.USERS_MANAGE,
    ),
    UserRole.MANAGER: (
        Permission.LEADS_VIEW_ALL,
        Permission.LEADS_VIEW_ASSIGNED,
        Permission.LEADS_CREATE,
        Permission.LEADS_EDIT,
        Permission.LEADS_ASSIGN,
        Permission.LEADS_TRANSFER,
        Permission.REPORTS_VIEW,
        Permission.REPORTS_EXPORT,
        Permission.USERS_VIEW,
    ),
    UserRole.SALESPERSON: (
        Permission.LEADS_VIEW_ASSIGNED,
        Permission.LEADS_EDIT,
    ),
    UserRole.MEMBER: (Permission.LEADS_VIEW_ASSIGNED,),
    UserRole.VIEWER: (),
}

# Convenience predicates generated onto RoleAuthority: name -> permission
CAPABILITIES: dict[str, Permission] = {
    "can_view_all_leads": Permission.LEADS_VIEW_ALL,
    "can_assign_leads": Permission.LEADS_ASSIGN,
    "can_transfer_leads": Permission.LEADS_TRANSFER,
    "can_view_reports": Permission.REPORTS_VIEW,
    "can_manage_settings": Permission.SETTINGS_MANAGE,
    "can_manage_users": Permission.USERS_MANAGE,
}


def _contains(granted: frozenset[Permission], permission: Any) -> bool:
    try:
        return permission in granted
    except TypeError:
        return False


def _as_list(permissions: Any) -> list | None:
    if permissions is None or isinstance(permissions, str):
        return None
    try:
        return list(permissions)
    except TypeError:
        return None


class RoleAuthority:
    """
    Answers rank and permission queries for a role.

    Roles may be given as UserRole members or raw strings (as stored on a
    profile row). Both tables are copied into frozen structures at
    construction, so instances are safe to share for the whole process.
    """

    def __init__(
        self,
        hierarchy: Mapping[UserRole, int] | None = None,
        permissions: Mapping[UserRole, Iterable[Permission]] | None = None,
    ):
        hierarchy = ROLE_HIERARCHY if hierarchy is None else hierarchy
        permissions = ROLE_PERMISSIONS if permissions is None else permissions

        ranks = sorted(hierarchy.values())
        if len(set(ranks)) != len(ranks):
            raise ValueError("Role hierarchy ranks must be unique")

        self._hierarchy: dict[UserRole, int] = dict(hierarchy)
        self._permissions: dict[UserRole, frozenset[Permission]] = {
            role: frozenset(permissions.get(role, ())) for role in self._hierarchy
        }

    @property
    def roles(self) -> list[UserRole]:
        """Known roles, lowest rank first."""
        return sorted(self._hierarchy, key=self._hierarchy.__getitem__)

    def resolve(self, role: Any) -> UserRole | None:
        """
        Coerce a raw role value into a known UserRole.

        Returns None for an absent role (not authenticated yet) and for
        values outside the hierarchy; the latter are logged.
        """
        if role is None or role == "":
            return None
        try:
            resolved = UserRole(role)
        except ValueError:
            logger.warning("Unknown role %r, treating as no privilege", role)
            return None
        if resolved not in self._hierarchy:
            logger.warning("Role %r missing from hierarchy, treating as no privilege", role)
            return None
        return resolved

    def rank(self, role: Any) -> int:
        """
        Get the numeric rank of a role.

        Raises:
            UnknownRole: If the role is absent or not in the hierarchy
        """
        resolved = self.resolve(role)
        if resolved is None:
            raise UnknownRole(role)
        return self._hierarchy[resolved]

    def _safe_rank(self, role: Any) -> int:
        resolved = self.resolve(role)
        if resolved is None:
            return 0
        return self._hierarchy[resolved]

    def is_at_least(self, role: Any, target: Any) -> bool:
        """Check if role's rank meets or exceeds target's rank."""
        role_rank = self._safe_rank(role)
        target_rank = self._safe_rank(target)
        if role_rank == 0 or target_rank == 0:
            return False
        return role_rank >= target_rank

    def is_exactly(self, role: Any, target: Any) -> bool:
        resolved = self.resolve(role)
        return resolved is not None and resolved == self.resolve(target)

    def permissions_for(self, role: Any) -> frozenset[Permission]:
        resolved = self.resolve(role)
        if resolved is None:
            return frozenset()
        return self._permissions[resolved]

    def has_permission(self, role: Any, permission: Permission | str) -> bool:
        return _contains(self.permissions_for(role), permission)

    def has_any(self, role: Any, permissions: Iterable[Permission | str]) -> bool:
        granted = self.permissions_for(role)
        return any(_contains(granted, permission) for permission in _as_list(permissions) or ())

    def has_all(self, role: Any, permissions: Iterable[Permission | str]) -> bool:
        """
        True when every listed permission is granted.

        An empty list is vacuously satisfied; None or a non-iterable value
        grants nothing.
        """
        candidates = _as_list(permissions)
        if candidates is None:
            return False
        granted = self.permissions_for(role)
        return all(_contains(granted, permission) for permission in candidates)

    def can_view_assigned_leads_only(self, role: Any) -> bool:
        granted = self.permissions_for(role)
        return (
            Permission.LEADS_VIEW_ASSIGNED in granted
            and Permission.LEADS_VIEW_ALL not in granted
        )

    def is_salesperson(self, role: Any) -> bool:
        return self.is_exactly(role, UserRole.SALESPERSON)

    def is_manager(self, role: Any) -> bool:
        return self.is_exactly(role, UserRole.MANAGER)

    def is_admin(self, role: Any) -> bool:
        """Check if role is ADMIN or SUPER_ADMIN."""
        return self.is_exactly(role, UserRole.ADMIN) or self.is_exactly(
            role, UserRole.SUPER_ADMIN
        )

    def summary(self, role: Any) -> dict:
        """
        Snapshot of everything the UI gates on for one role.

        Returns:
            Dict with the resolved role, its sorted permission list and one
            boolean per derived predicate
        """
        resolved = self.resolve(role)
        result = {
            "role": resolved,
            "permissions": sorted(self.permissions_for(resolved), key=lambda p: p.value),
        }
        for name in CAPABILITIES:
            result[name] = getattr(self, name)(resolved)
        result["can_view_assigned_leads_only"] = self.can_view_assigned_leads_only(resolved)
        result["is_salesperson"] = self.is_salesperson(resolved)
        result["is_manager"] = self.is_manager(resolved)
        result["is_admin"] = self.is_admin(resolved)
        return result


def _capability(permission: Permission):
    def check(self: RoleAuthority, role: Any) -> bool:
        return self.has_permission(role, permission)

    check.__doc__ = f"Check if role has {permission.value}."
    return check


for _name, _permission in CAPABILITIES.items():
    setattr(RoleAuthority, _name, _capability(_permission))


# Shared instance over the default tables
role_authority = RoleAuthority()
