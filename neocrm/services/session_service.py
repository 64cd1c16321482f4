import logging

from sqlalchemy.orm import Session

from neocrm.core.exceptions import ForbiddenException, NotFoundException
from neocrm.core.permissions import RoleAuthority
from neocrm.core.tenant_scope import TenantOrigin, TenantScope
from neocrm.models.access_context import AccessContext
from neocrm.models.cliente import Cliente
from neocrm.models.profile import Profile
from neocrm.models.role import UserRole
from neocrm.repositories.cliente_repository import ClienteRepository
from neocrm.repositories.session_state_repository import SqlTenantStore

logger = logging.getLogger(__name__)


class SessionService:
    """Service layer for the session's tenant selection"""

    def __init__(self, db: Session, authority: RoleAuthority):
        self.db = db
        self.authority = authority
        self.cliente_repo = ClienteRepository(db)

    def accessible_clientes(self, profile: Profile) -> list[Cliente]:
        """
        List the clientes a profile may select.

        SUPER_ADMIN sees every cliente; everyone else sees the clientes
        they hold a membership in.
        """
        if self.authority.is_exactly(profile.role, UserRole.SUPER_ADMIN):
            return self.cliente_repo.get_all()
        return self.cliente_repo.get_for_user(profile.id)

    def _can_access(self, profile: Profile, cliente_id: str) -> bool:
        return any(cliente.id == cliente_id for cliente in self.accessible_clientes(profile))

    def open_scope(self, profile: Profile, url_tenant_id: str | None = None) -> TenantScope:
        """
        Build the tenant scope for a profile's session.

        A URL override the profile cannot access is ignored, leaving the
        persisted selection in place. A persisted tenant that is no longer
        accessible is cleared; with nothing selected the first accessible
        cliente becomes the default.

        Args:
            profile: Authenticated profile
            url_tenant_id: Tenant id from the request's query string

        Returns:
            Initialized TenantScope
        """
        clientes = self.accessible_clientes(profile)
        accessible_ids = {cliente.id for cliente in clientes}

        url_tenant_id = (url_tenant_id or "").strip() or None
        if url_tenant_id is not None and url_tenant_id not in accessible_ids:
            logger.warning(
                "Profile %s has no access to cliente %s, ignoring URL override",
                profile.id,
                url_tenant_id,
            )
            url_tenant_id = None

        scope = TenantScope(SqlTenantStore(self.db, profile.id))
        tenant_id = scope.initialize(url_tenant_id)

        if tenant_id is not None and tenant_id not in accessible_ids:
            logger.warning(
                "Profile %s has no access to cliente %s, clearing selection",
                profile.id,
                tenant_id,
            )
            scope.set(None, TenantOrigin.NONE)
            tenant_id = None

        if tenant_id is None and clientes:
            scope.set(clientes[0].id, TenantOrigin.DEFAULT)
            logger.info("Default cliente %s selected for profile %s", clientes[0].id, profile.id)

        return scope

    def select_tenant(self, context: AccessContext, cliente_id: str | None) -> bool:
        """
        Change the session's current cliente.

        Args:
            context: Access context of the caller
            cliente_id: Cliente to select, or None to clear

        Returns:
            True if the selection changed

        Raises:
            NotFoundException: If the cliente does not exist
            ForbiddenException: If the caller cannot access the cliente
        """
        if cliente_id is None:
            return context.scope.set(None)

        if not self.cliente_repo.get_by_id(cliente_id):
            raise NotFoundException("Cliente not found")

        if not self._can_access(context.profile, cliente_id):
            raise ForbiddenException("No access to this cliente")

        return context.scope.set(cliente_id)
