from collections.abc import Callable, Iterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from neocrm.config import settings
from neocrm.core.exceptions import UnauthorizedException
from neocrm.core.permissions import RoleAuthority, role_authority
from neocrm.core.security import decode_jwt
from neocrm.core.tenant_scope import TenantScope
from neocrm.database import get_db
from neocrm.models.access_context import AccessContext
from neocrm.models.profile import Profile
from neocrm.models.role import Permission
from neocrm.repositories.profile_repository import ProfileRepository
from neocrm.services.session_service import SessionService

security = HTTPBearer()


def get_role_authority() -> RoleAuthority:
    """FastAPI dependency returning the role/permission tables in effect."""
    return role_authority


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Depends(security), db: Session = Depends(get_db)
) -> Profile:
    """
    FastAPI dependency to validate the Supabase token and load the profile.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using the Supabase JWT secret
    3. Load the profile whose id is the 'sub' claim
    4. Without a profile row, return an unsaved profile with no role, so
       every permission check fails closed until the row exists

    Raises:
        HTTPException 401: If token invalid or expired
    """
    try:
        payload = decode_jwt(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    profile = ProfileRepository(db).get_by_id(payload["sub"])
    if profile is None:
        email = payload.get("email") or ""
        profile = Profile(
            id=payload["sub"],
            email=email,
            full_name=email.split("@")[0] or None,
            role=None,
        )
    return profile


def get_tenant_scope(
    request: Request,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
    authority: RoleAuthority = Depends(get_role_authority),
) -> Iterator[TenantScope]:
    """
    FastAPI dependency opening the caller's tenant scope for one request.

    A cliente id in the query string overrides the persisted selection.
    Subscribers are dropped when the request ends.
    """
    service = SessionService(db, authority)
    scope = service.open_scope(profile, request.query_params.get(settings.TENANT_QUERY_PARAM))
    try:
        yield scope
    finally:
        scope.close()


def get_access_context(
    profile: Profile = Depends(get_current_profile),
    authority: RoleAuthority = Depends(get_role_authority),
    scope: TenantScope = Depends(get_tenant_scope),
) -> AccessContext:
    return AccessContext(profile=profile, authority=authority, scope=scope)


def require_permission(permission: Permission) -> Callable[..., AccessContext]:
    """
    Build a dependency that rejects callers lacking a permission.

    Usage:
        @router.get("/reports")
        def reports(context: AccessContext = Depends(require_permission(Permission.REPORTS_VIEW))):
            ...
    """

    def dependency(context: AccessContext = Depends(get_access_context)) -> AccessContext:
        context.require_permission(permission)
        return context

    return dependency
