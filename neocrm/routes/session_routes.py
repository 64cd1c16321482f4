from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from neocrm.core.navigation import NAVIGATION, filter_navigation
from neocrm.core.permissions import RoleAuthority
from neocrm.database import get_db
from neocrm.dependencies import (
    get_access_context,
    get_current_profile,
    get_role_authority,
)
from neocrm.models.access_context import AccessContext
from neocrm.models.profile import Profile
from neocrm.services.session_service import SessionService
from neocrm.schemas.session_schemas import (
    ClienteResponse,
    NavItemResponse,
    PermissionSummaryResponse,
    TenantResponse,
    TenantSelectRequest,
    TenantSelectResponse,
)

router = APIRouter()


@router.get("/permissions", response_model=PermissionSummaryResponse)
async def get_permissions(
    profile: Profile = Depends(get_current_profile),
    authority: RoleAuthority = Depends(get_role_authority),
):
    """
    Get the authenticated user's role, permissions and UI gates.

    Unknown or missing roles come back with no permissions.
    """
    return authority.summary(profile.role)


@router.get("/tenant", response_model=TenantResponse)
async def get_current_tenant(context: AccessContext = Depends(get_access_context)):
    """
    Get the session's current cliente.

    - A `cliente_id` query parameter overrides the persisted selection
      and is remembered for later requests
    - Defaults to the first accessible cliente when nothing is selected
    """
    return {"cliente_id": context.tenant_id, "origin": context.scope.origin}


@router.put("/tenant", response_model=TenantSelectResponse)
async def select_tenant(
    select_request: TenantSelectRequest,
    context: AccessContext = Depends(get_access_context),
    db: Session = Depends(get_db),
):
    """
    Select the session's current cliente.

    - **SUPER_ADMIN** may select any cliente
    - Other roles may select only clientes they are members of
    - `null` clears the selection
    """
    service = SessionService(db, context.authority)
    changed = service.select_tenant(context, select_request.cliente_id)
    return {
        "cliente_id": context.tenant_id,
        "origin": context.scope.origin,
        "changed": changed,
    }


@router.get("/clientes", response_model=list[ClienteResponse])
async def list_clientes(
    profile: Profile = Depends(get_current_profile),
    authority: RoleAuthority = Depends(get_role_authority),
    db: Session = Depends(get_db),
):
    """List the clientes the authenticated user may select."""
    service = SessionService(db, authority)
    return service.accessible_clientes(profile)


@router.get("/navigation", response_model=list[NavItemResponse])
async def get_navigation(context: AccessContext = Depends(get_access_context)):
    """Sidebar entries visible to the user, linked to the current cliente."""
    return filter_navigation(NAVIGATION, context.authority, context.profile.role, context.tenant_id)
