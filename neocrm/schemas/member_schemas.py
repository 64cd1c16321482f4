from pydantic import BaseModel, Field
from datetime import datetime
from neocrm.models.role import UserRole


class MemberResponse(BaseModel):
    """Cliente member details with profile info"""

    id: int
    user_id: str
    cliente_id: str
    email: str
    full_name: str | None = None
    role: str  # Raw stored role, may be outside UserRole
    created_at: datetime


class MemberInviteRequest(BaseModel):
    """Invite a user to the current cliente"""

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    role: UserRole = Field(
        default=UserRole.VIEWER, description="Role to assign (default: VIEWER)"
    )


class MemberRoleUpdate(BaseModel):
    """Change a member's role"""

    role: UserRole = Field(..., description="New role to assign")


class MemberRemoveResponse(BaseModel):
    """Response after removing member"""

    message: str
    removed_member_id: int
