"""HTTP client for the CRM backend REST API with tenant scoping."""

import logging

import httpx

from neocrm.config import settings
from neocrm.core.exceptions import BackendAPIError
from neocrm.core.tenant_requests import tenant_headers
from neocrm.core.tenant_scope import TenantScope

logger = logging.getLogger(__name__)


class BackendClient:
    """
    Thin wrapper over httpx.Client that attaches the current tenant.

    Every request reads the scope at call time, so a tenant change between
    two calls is picked up without rebuilding the client.
    """

    def __init__(
        self,
        scope: TenantScope,
        base_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout: float | None = None,
    ):
        self.scope = scope
        self._client = httpx.Client(
            base_url=base_url or settings.BACKEND_API_URL,
            transport=transport,
            timeout=timeout or settings.BACKEND_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
        )

    def request(self, method: str, path: str, **kwargs):
        """
        Send a request and decode the JSON body.

        Raises:
            BackendAPIError: If the backend answers with a non-2xx status
        """
        headers = {**kwargs.pop("headers", {}), **tenant_headers(self.scope)}
        response = self._client.request(method, path, headers=headers, **kwargs)

        if response.is_error:
            message = f"HTTP error: {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message = body.get("error") or body.get("message") or message
            logger.warning("%s %s failed: %s", method, path, message)
            raise BackendAPIError(response.status_code, message)

        if not response.content:
            return None
        return response.json()

    def get(self, path: str, **kwargs):
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs):
        return self.request("POST", path, **kwargs)

    def patch(self, path: str, **kwargs):
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs):
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
