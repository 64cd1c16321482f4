from datetime import datetime
from pydantic import BaseModel, Field
from neocrm.core.tenant_scope import TenantOrigin
from neocrm.models.role import Permission, UserRole


class PermissionSummaryResponse(BaseModel):
    """Role, permissions and derived UI gates for the authenticated user"""

    role: UserRole | None
    permissions: list[Permission]
    can_view_all_leads: bool
    can_view_assigned_leads_only: bool
    can_assign_leads: bool
    can_transfer_leads: bool
    can_view_reports: bool
    can_manage_settings: bool
    can_manage_users: bool
    is_salesperson: bool
    is_manager: bool
    is_admin: bool


class TenantResponse(BaseModel):
    """Current cliente of the session"""

    cliente_id: str | None
    origin: TenantOrigin


class TenantSelectRequest(BaseModel):
    """Select a cliente; null clears the selection"""

    cliente_id: str | None = Field(None, max_length=64)


class TenantSelectResponse(TenantResponse):
    changed: bool


class ClienteResponse(BaseModel):
    """Cliente details"""

    id: str
    nome: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NavItemResponse(BaseModel):
    name: str
    href: str | None
    children: list["NavItemResponse"] = []
