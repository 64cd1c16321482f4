"""Helpers that carry the current tenant onto outbound requests and links."""

import logging
from collections.abc import Callable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from neocrm.config import settings
from neocrm.core.tenant_scope import TenantScope

logger = logging.getLogger(__name__)


def _tenant_id(source: TenantScope | str | None) -> str | None:
    if isinstance(source, TenantScope):
        return source.get()
    return source or None


def tenant_headers(source: TenantScope | str | None) -> dict[str, str]:
    """
    Build the tenant header for a backend API call.

    Args:
        source: A TenantScope or a tenant id

    Returns:
        {"cliente_id": <id>}, or an empty dict when no tenant is selected
    """
    tenant_id = _tenant_id(source)
    if tenant_id is None:
        return {}
    return {settings.TENANT_HEADER_NAME: tenant_id}


def with_tenant_param(href: str, source: TenantScope | str | None) -> str:
    """
    Set the tenant query parameter on an internal link.

    Existing query parameters are kept; a previous tenant parameter is
    replaced. Links are returned unchanged when no tenant is selected.
    """
    tenant_id = _tenant_id(source)
    if tenant_id is None:
        return href

    parts = urlsplit(href)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != settings.TENANT_QUERY_PARAM
    ]
    query.append((settings.TENANT_QUERY_PARAM, tenant_id))
    return urlunsplit(parts._replace(query=urlencode(query)))


class TenantScopedLoader:
    """
    Re-runs a fetch whenever the current tenant changes.

    The fetch receives the tenant id in effect. Fetch failures are logged
    and leave the loader subscribed, so the next tenant change retries.
    """

    def __init__(self, scope: TenantScope, fetch: Callable[[str | None], object]):
        self.scope = scope
        self.fetch = fetch
        self._unsubscribe: Callable[[], None] | None = None

    def start(self) -> None:
        """Load once now and after every tenant change."""
        if self._unsubscribe is None:
            self._unsubscribe = self.scope.subscribe(self._on_change)
        self.reload()

    def reload(self) -> None:
        self._run(self.scope.get())

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, tenant_id: str | None) -> None:
        self._run(tenant_id)

    def _run(self, tenant_id: str | None) -> None:
        try:
            self.fetch(tenant_id)
        except Exception:
            logger.exception("Failed to load data for tenant %s", tenant_id)
