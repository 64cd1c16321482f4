import httpx
import pytest

from neocrm.core.backend_client import BackendClient
from neocrm.core.exceptions import BackendAPIError
from neocrm.core.tenant_requests import (
    TenantScopedLoader,
    tenant_headers,
    with_tenant_param,
)
from neocrm.core.tenant_scope import MemoryTenantStore, TenantScope


@pytest.fixture
def scope():
    scope = TenantScope(MemoryTenantStore())
    scope.initialize()
    return scope


class TestTenantHeaders:
    def test_header_from_scope(self, scope):
        scope.set("tenant-42")
        assert tenant_headers(scope) == {"cliente_id": "tenant-42"}

    def test_header_omitted_without_tenant(self, scope):
        assert tenant_headers(scope) == {}
        assert tenant_headers(None) == {}

    def test_header_from_plain_id(self):
        assert tenant_headers("tenant-7") == {"cliente_id": "tenant-7"}


class TestWithTenantParam:
    def test_adds_parameter(self):
        assert with_tenant_param("/leads", "tenant-42") == "/leads?cliente_id=tenant-42"

    def test_keeps_other_parameters(self):
        href = with_tenant_param("/leads?page=2", "tenant-42")
        assert href == "/leads?page=2&cliente_id=tenant-42"

    def test_replaces_previous_tenant(self):
        href = with_tenant_param("/leads?cliente_id=old&page=2", "tenant-42")
        assert href == "/leads?page=2&cliente_id=tenant-42"

    def test_unchanged_without_tenant(self):
        assert with_tenant_param("/leads?page=2", None) == "/leads?page=2"

    def test_reads_scope(self, scope):
        scope.set("tenant-42")
        assert with_tenant_param("/", scope) == "/?cliente_id=tenant-42"


class TestTenantScopedLoader:
    """Tests for reloading tenant-scoped data on tenant change"""

    def test_loads_on_start_and_on_change(self, scope):
        calls = []
        loader = TenantScopedLoader(scope, calls.append)

        loader.start()
        scope.set("tenant-a")
        scope.set("tenant-a")
        scope.set("tenant-b")

        assert calls == [None, "tenant-a", "tenant-b"]

    def test_reload_uses_current_tenant(self, scope):
        calls = []
        loader = TenantScopedLoader(scope, calls.append)
        scope.set("tenant-a")

        loader.reload()

        assert calls == ["tenant-a"]

    def test_stop_unsubscribes(self, scope):
        calls = []
        loader = TenantScopedLoader(scope, calls.append)
        loader.start()
        loader.stop()

        scope.set("tenant-a")

        assert calls == [None]

    def test_fetch_error_is_logged_and_retried_on_next_change(self, scope, caplog):
        calls = []

        def fetch(tenant_id):
            calls.append(tenant_id)
            if tenant_id == "tenant-a":
                raise RuntimeError("backend down")

        loader = TenantScopedLoader(scope, fetch)
        loader.start()
        scope.set("tenant-a")
        scope.set("tenant-b")

        assert calls == [None, "tenant-a", "tenant-b"]
        assert "Failed to load data for tenant tenant-a" in caplog.text


class TestBackendClient:
    """Tests for the tenant-scoped backend API client"""

    def _client(self, scope, handler):
        return BackendClient(
            scope,
            base_url="http://backend.test/api",
            transport=httpx.MockTransport(handler),
        )

    def test_attaches_tenant_header(self, scope):
        seen = {}

        def handler(request):
            seen["cliente_id"] = request.headers.get("cliente_id")
            seen["path"] = request.url.path
            return httpx.Response(200, json={"success": True, "data": []})

        scope.set("tenant-42")
        with self._client(scope, handler) as backend:
            result = backend.get("/leads")

        assert result == {"success": True, "data": []}
        assert seen == {"cliente_id": "tenant-42", "path": "/api/leads"}

    def test_omits_header_without_tenant(self, scope):
        seen = {}

        def handler(request):
            seen["has_header"] = "cliente_id" in request.headers
            return httpx.Response(200, json={})

        with self._client(scope, handler) as backend:
            backend.get("/leads")

        assert seen["has_header"] is False

    def test_picks_up_tenant_change_between_calls(self, scope):
        tenants = []

        def handler(request):
            tenants.append(request.headers.get("cliente_id"))
            return httpx.Response(200, json={})

        with self._client(scope, handler) as backend:
            scope.set("tenant-a")
            backend.post("/leads/search", json={"q": "ana"})
            scope.set("tenant-b")
            backend.post("/leads/search", json={"q": "ana"})

        assert tenants == ["tenant-a", "tenant-b"]

    def test_error_response_raises_with_backend_message(self, scope):
        def handler(request):
            return httpx.Response(403, json={"error": "cliente_id obrigatório"})

        with self._client(scope, handler) as backend:
            with pytest.raises(BackendAPIError) as exc_info:
                backend.delete("/leads/1")

        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "cliente_id obrigatório"

    def test_error_without_json_body(self, scope):
        def handler(request):
            return httpx.Response(500, text="Internal Server Error")

        with self._client(scope, handler) as backend:
            with pytest.raises(BackendAPIError) as exc_info:
                backend.patch("/leads/1", json={})

        assert str(exc_info.value) == "HTTP error: 500"

    def test_empty_body_returns_none(self, scope):
        with self._client(scope, lambda request: httpx.Response(204)) as backend:
            assert backend.delete("/leads/1") is None
