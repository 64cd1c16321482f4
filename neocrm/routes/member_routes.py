from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from neocrm.database import get_db
from neocrm.dependencies import get_access_context, require_permission
from neocrm.models.access_context import AccessContext
from neocrm.models.role import Permission
from neocrm.services.member_service import MemberService
from neocrm.schemas.member_schemas import (
    MemberInviteRequest,
    MemberRemoveResponse,
    MemberResponse,
    MemberRoleUpdate,
)

router = APIRouter(dependencies=[Depends(require_permission(Permission.USERS_VIEW))])


@router.get("", response_model=list[MemberResponse])
async def list_members(
    context: AccessContext = Depends(get_access_context),
    db: Session = Depends(get_db),
):
    """
    List all members of the current cliente.

    - **Requires users:view**
    """
    service = MemberService(db)
    return service.list_members(context)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def invite_member(
    invite_request: MemberInviteRequest,
    context: AccessContext = Depends(get_access_context),
    db: Session = Depends(get_db),
):
    """
    Invite a user to the current cliente.

    - **Requires users:manage**
    - Default role: VIEWER
    - Only SUPER_ADMIN can invite as SUPER_ADMIN
    """
    service = MemberService(db)
    return service.invite_member(invite_request, context)


@router.patch("/{member_id}/role", response_model=MemberResponse)
async def update_member_role(
    member_id: int,
    role_update: MemberRoleUpdate,
    context: AccessContext = Depends(get_access_context),
    db: Session = Depends(get_db),
):
    """
    Update a member's role.

    - **Requires users:manage**
    - Super admin rows cannot be changed
    - Cannot change your own role
    """
    service = MemberService(db)
    return service.update_member_role(member_id, role_update, context)


@router.delete("/{member_id}", response_model=MemberRemoveResponse)
async def remove_member(
    member_id: int,
    context: AccessContext = Depends(get_access_context),
    db: Session = Depends(get_db),
):
    """
    Remove a member from the current cliente.

    - **Requires users:manage**
    - Super admins cannot be removed
    - Cannot remove yourself
    """
    service = MemberService(db)
    service.remove_member(member_id, context)

    return {
        "message": "Member removed successfully",
        "removed_member_id": member_id,
    }
