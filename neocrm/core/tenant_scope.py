"""
Session-scoped holder of the currently active tenant (cliente).

One TenantScope is built per session from a TenantStore. The in-memory
value and subscriber notification are synchronous; the durable write is
best-effort and never blocks a tenant change.
"""

import logging
from collections.abc import Callable
from enum import Enum as PyEnum
from typing import Protocol

from neocrm.core.exceptions import TenantStorageError

logger = logging.getLogger(__name__)

TenantListener = Callable[[str | None], None]


class TenantOrigin(str, PyEnum):
    """Where the current tenant value came from."""

    NONE = "none"
    PERSISTED = "persisted"
    EXPLICIT = "explicit"
    URL = "url"
    DEFAULT = "default"


class TenantStore(Protocol):
    """
    Durable key-value slot holding the last selected tenant id.

    Implementations raise TenantStorageError when the backing store fails.
    """

    def load(self) -> str | None: ...

    def save(self, tenant_id: str) -> None: ...

    def clear(self) -> None: ...


class MemoryTenantStore:
    """TenantStore kept in process memory, shared across scopes that reuse it."""

    def __init__(self, tenant_id: str | None = None):
        self.tenant_id = tenant_id

    def load(self) -> str | None:
        return self.tenant_id

    def save(self, tenant_id: str) -> None:
        self.tenant_id = tenant_id

    def clear(self) -> None:
        self.tenant_id = None


def _normalize(tenant_id: str | None) -> str | None:
    if tenant_id is None:
        return None
    tenant_id = str(tenant_id).strip()
    return tenant_id or None


class TenantScope:
    """
    Current-tenant selector with change notification.

    Usage:
        scope = TenantScope(store)
        scope.initialize(url_tenant_id=request.query_params.get("cliente_id"))
        unsubscribe = scope.subscribe(lambda tenant_id: reload(tenant_id))
        scope.set("tenant-42")
    """

    def __init__(self, store: TenantStore):
        self._store = store
        self._tenant_id: str | None = None
        self._origin = TenantOrigin.NONE
        self._listeners: list[TenantListener] = []

    @property
    def origin(self) -> TenantOrigin:
        return self._origin

    def initialize(self, url_tenant_id: str | None = None) -> str | None:
        """
        Seed the current tenant at session start.

        The persisted value is loaded first; a URL value, when present,
        overrides it and is persisted so later reloads keep it. Subscribers
        are not notified.

        Args:
            url_tenant_id: Tenant id taken from the URL query string, if any

        Returns:
            The initialized tenant id, or None
        """
        url_tenant_id = _normalize(url_tenant_id)

        try:
            persisted = _normalize(self._store.load())
        except TenantStorageError as e:
            logger.warning("Could not load persisted tenant: %s", e)
            persisted = None

        if url_tenant_id is not None:
            self._tenant_id = url_tenant_id
            self._origin = TenantOrigin.URL
            if url_tenant_id != persisted:
                self._persist(url_tenant_id)
        elif persisted is not None:
            self._tenant_id = persisted
            self._origin = TenantOrigin.PERSISTED
        else:
            self._tenant_id = None
            self._origin = TenantOrigin.NONE

        logger.debug("Tenant scope initialized: %s (%s)", self._tenant_id, self._origin.value)
        return self._tenant_id

    def get(self) -> str | None:
        return self._tenant_id

    def set(self, tenant_id: str | None, origin: TenantOrigin = TenantOrigin.EXPLICIT) -> bool:
        """
        Change the current tenant, persist it and notify subscribers.

        Setting the value already held is a no-op.

        Args:
            tenant_id: New tenant id, or None to clear the selection
            origin: Source of the change

        Returns:
            True if the value changed and subscribers were notified
        """
        tenant_id = _normalize(tenant_id)
        if tenant_id == self._tenant_id:
            return False

        self._tenant_id = tenant_id
        self._origin = origin
        self._persist(tenant_id)

        logger.info("Tenant changed to %s (%s)", tenant_id, origin.value)
        for listener in tuple(self._listeners):
            try:
                listener(tenant_id)
            except Exception:
                logger.exception("Tenant change listener %r failed", listener)
        return True

    def subscribe(self, listener: TenantListener) -> Callable[[], None]:
        """
        Register a callback run after every tenant change.

        Returns:
            Disposer that removes the callback; calling it twice is harmless
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Drop all subscribers at the end of the session."""
        self._listeners.clear()

    def __enter__(self) -> "TenantScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _persist(self, tenant_id: str | None) -> None:
        try:
            if tenant_id is None:
                self._store.clear()
            else:
                self._store.save(tenant_id)
        except TenantStorageError as e:
            logger.warning("Could not persist tenant %s: %s", tenant_id, e)

    def __repr__(self) -> str:
        return f"<TenantScope(tenant_id={self._tenant_id!r}, origin={self._origin.value})>"
