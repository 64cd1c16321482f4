import logging

from sqlalchemy.orm import Session

from neocrm.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from neocrm.models.access_context import AccessContext
from neocrm.models.cliente_member import ClienteMember
from neocrm.models.role import Permission, UserRole
from neocrm.repositories.cliente_member_repository import ClienteMemberRepository
from neocrm.repositories.profile_repository import ProfileRepository
from neocrm.schemas.member_schemas import MemberInviteRequest, MemberRoleUpdate

logger = logging.getLogger(__name__)


class MemberService:
    """Service layer for member management in the current cliente"""

    def __init__(self, db: Session):
        self.db = db
        self.member_repo = ClienteMemberRepository(db)
        self.profile_repo = ProfileRepository(db)

    def _to_dict(self, membership: ClienteMember) -> dict:
        profile = membership.profile
        return {
            "id": membership.id,
            "user_id": membership.user_id,
            "cliente_id": membership.cliente_id,
            "email": profile.email if profile else "unknown",
            "full_name": profile.full_name if profile else None,
            "role": membership.role,
            "created_at": membership.created_at,
        }

    def _get_member(self, member_id: int, context: AccessContext) -> ClienteMember:
        membership = self.member_repo.get_by_id(member_id, context.require_tenant())
        if not membership:
            raise NotFoundException("Member not found in this cliente")
        return membership

    def _is_locked(self, membership: ClienteMember, context: AccessContext) -> bool:
        """Rows of super admins cannot be changed or removed."""
        profile_role = membership.profile.role if membership.profile else None
        return context.authority.is_exactly(profile_role, UserRole.SUPER_ADMIN) or (
            context.authority.is_exactly(membership.role, UserRole.SUPER_ADMIN)
        )

    def list_members(self, context: AccessContext) -> list[dict]:
        """
        Get all members of the current cliente with profile details.

        Raises:
            TenantNotSelected: If no cliente is selected
            ForbiddenException: If the caller lacks users:view
        """
        cliente_id = context.require_tenant()
        context.require_permission(Permission.USERS_VIEW)

        memberships = self.member_repo.get_cliente_members(cliente_id)
        return [self._to_dict(membership) for membership in memberships]

    def invite_member(self, invite_request: MemberInviteRequest, context: AccessContext) -> dict:
        """
        Add a user to the current cliente.

        Args:
            invite_request: Invite details with email and role
            context: Access context

        Returns:
            Created membership

        Raises:
            ForbiddenException: If the caller lacks users:manage or grants super_admin
            ValidationException: If the user is already a member
        """
        cliente_id = context.require_tenant()
        context.require_permission(Permission.USERS_MANAGE)

        # Only super admins can grant super admin
        if invite_request.role == UserRole.SUPER_ADMIN and not context.is_super_admin():
            raise ForbiddenException("Only super admins can invite super admins")

        profile = self.profile_repo.get_or_create_by_email(
            invite_request.email, invite_request.role.value
        )

        existing = self.member_repo.get_membership(profile.id, cliente_id)
        if existing:
            raise ValidationException(f"User {invite_request.email} is already a member")

        membership = ClienteMember(
            cliente_id=cliente_id,
            user_id=profile.id,
            role=invite_request.role.value,
        )
        membership = self.member_repo.create(membership)
        logger.info(
            "Profile %s invited %s to cliente %s as %s",
            context.profile.id,
            profile.email,
            cliente_id,
            membership.role,
        )
        return self._to_dict(membership)

    def update_member_role(
        self, member_id: int, role_update: MemberRoleUpdate, context: AccessContext
    ) -> dict:
        """
        Change a member's role.

        Only the membership row changes. Permission checks read the role on
        the member's profile, so their effective permissions stay the same
        until that profile role is updated as well.

        Raises:
            ForbiddenException: If the caller lacks users:manage, targets
                themselves, targets a super admin row or grants super_admin
            NotFoundException: If membership not found
        """
        context.require_permission(Permission.USERS_MANAGE)
        membership = self._get_member(member_id, context)

        # Cannot modify self (check first for better error message)
        if membership.user_id == context.profile.id:
            raise ForbiddenException("Cannot change your own role")

        if self._is_locked(membership, context):
            raise ForbiddenException("Cannot change a super admin's role")

        if role_update.role == UserRole.SUPER_ADMIN and not context.is_super_admin():
            raise ForbiddenException("Only super admins can grant super admin")

        membership.role = role_update.role.value
        membership = self.member_repo.update(membership)
        logger.info("Member %s role changed to %s", member_id, membership.role)
        return self._to_dict(membership)

    def remove_member(self, member_id: int, context: AccessContext) -> None:
        """
        Remove a member from the current cliente.

        Raises:
            ForbiddenException: If the caller lacks users:manage, targets
                themselves or targets a super admin row
            NotFoundException: If membership not found
        """
        context.require_permission(Permission.USERS_MANAGE)
        membership = self._get_member(member_id, context)

        # Cannot remove self (check first for better error message)
        if membership.user_id == context.profile.id:
            raise ForbiddenException("Cannot remove yourself from cliente")

        if self._is_locked(membership, context):
            raise ForbiddenException("Cannot remove a super admin")

        cliente_id = membership.cliente_id
        self.member_repo.delete(membership)
        logger.info("Member %s removed from cliente %s", member_id, cliente_id)
