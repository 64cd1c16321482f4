import pytest

from neocrm.models.session_state import SessionState
from neocrm.repositories.session_state_repository import SqlTenantStore


class TestPermissionSummary:
    """Tests for GET /api/session/permissions"""

    def test_manager_summary(self, client, headers_for, make_profile):
        make_profile("manager-1", role="manager")

        response = client.get("/api/session/permissions", headers=headers_for("manager-1"))

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "manager"
        assert "leads:assign" in data["permissions"]
        assert "leads:delete" not in data["permissions"]
        assert data["can_assign_leads"] is True
        assert data["can_manage_users"] is False
        assert data["is_manager"] is True

    def test_super_admin_is_admin(self, client, headers_for, make_profile):
        make_profile("root-1", role="super_admin")

        data = client.get("/api/session/permissions", headers=headers_for("root-1")).json()

        assert data["is_admin"] is True
        assert len(data["permissions"]) == 13

    def test_malformed_role_fails_closed(self, client, headers_for, make_profile):
        make_profile("odd-1", role="owner")

        data = client.get("/api/session/permissions", headers=headers_for("odd-1")).json()

        assert data["role"] is None
        assert data["permissions"] == []
        assert data["can_view_reports"] is False


class TestCurrentTenant:
    """Tests for GET /api/session/tenant"""

    def test_defaults_to_first_membership(
        self, client, headers_for, make_profile, add_member, cliente_a, cliente_b
    ):
        seller = make_profile("seller-1", role="salesperson")
        add_member(seller, cliente_b)
        add_member(seller, cliente_a)

        response = client.get("/api/session/tenant", headers=headers_for("seller-1"))

        assert response.status_code == 200
        assert response.json() == {"cliente_id": "cliente-b", "origin": "default"}

    def test_no_memberships_means_no_tenant(self, client, headers_for, make_profile, cliente_a):
        make_profile("lonely-1", role="member")

        response = client.get("/api/session/tenant", headers=headers_for("lonely-1"))

        assert response.json() == {"cliente_id": None, "origin": "none"}

    def test_persisted_selection_restored(
        self, client, db_session, headers_for, make_profile, add_member, cliente_a, cliente_b
    ):
        seller = make_profile("seller-1", role="salesperson")
        add_member(seller, cliente_a)
        add_member(seller, cliente_b)
        SqlTenantStore(db_session, "seller-1").save("cliente-b")

        response = client.get("/api/session/tenant", headers=headers_for("seller-1"))

        assert response.json() == {"cliente_id": "cliente-b", "origin": "persisted"}

    def test_url_parameter_overrides_and_is_persisted(
        self, client, db_session, headers_for, make_profile, add_member, cliente_a, cliente_b
    ):
        seller = make_profile("seller-1", role="salesperson")
        add_member(seller, cliente_a)
        add_member(seller, cliente_b)
        SqlTenantStore(db_session, "seller-1").save("cliente-a")

        response = client.get(
            "/api/session/tenant",
            params={"cliente_id": "cliente-b"},
            headers=headers_for("seller-1"),
        )
        assert response.json() == {"cliente_id": "cliente-b", "origin": "url"}

        # Reload without the URL parameter
        response = client.get("/api/session/tenant", headers=headers_for("seller-1"))
        assert response.json() == {"cliente_id": "cliente-b", "origin": "persisted"}

    def test_url_parameter_for_foreign_cliente_rejected(
        self, client, db_session, headers_for, make_profile, add_member, cliente_a, cliente_b
    ):
        seller = make_profile("seller-1", role="salesperson")
        add_member(seller, cliente_a)

        response = client.get(
            "/api/session/tenant",
            params={"cliente_id": "cliente-b"},
            headers=headers_for("seller-1"),
        )

        assert response.json()["cliente_id"] == "cliente-a"
        assert SqlTenantStore(db_session, "seller-1").load() == "cliente-a"

    def test_foreign_url_parameter_keeps_saved_selection(
        self, client, db_session, headers_for, make_profile, add_member, cliente_a, cliente_b
    ):
        seller = make_profile("seller-1", role="salesperson")
        add_member(seller, cliente_a)
        add_member(seller, cliente_b)
        client.put(
            "/api/session/tenant",
            json={"cliente_id": "cliente-b"},
            headers=headers_for("seller-1"),
        )

        response = client.get(
            "/api/session/tenant",
            params={"cliente_id": "not-mine"},
            headers=headers_for("seller-1"),
        )
        assert response.json() == {"cliente_id": "cliente-b", "origin": "persisted"}

        response = client.get("/api/session/tenant", headers=headers_for("seller-1"))
        assert response.json() == {"cliente_id": "cliente-b", "origin": "persisted"}
        assert SqlTenantStore(db_session, "seller-1").load() == "cliente-b"

    def test_super_admin_url_parameter_any_cliente(
        self, client, headers_for, make_profile, cliente_a, cliente_b
    ):
        make_profile("root-1", role="super_admin")

        response = client.get(
            "/api/session/tenant",
            params={"cliente_id": "cliente-b"},
            headers=headers_for("root-1"),
        )

        assert response.json() == {"cliente_id": "cliente-b", "origin": "url"}


class TestSelectTenant:
    """Tests for PUT /api/session/tenant"""

    def test_member_selects_own_cliente(
        self, client, headers_for, make_profile, add_member, cliente_a, cliente_b
    ):
        seller = make_profile("seller-1", role="salesperson")
        add_member(seller, cliente_a)
        add_member(seller, cliente_b)

        response = client.put(
            "/api/session/tenant",
            json={"cliente_id": "cliente-b"},
            headers=headers_for("seller-1"),
        )

        assert response.status_code == 200
        assert response.json() == {"cliente_id": "cliente-b", "origin": "explicit", "changed": True}

        current = client.get("/api/session/tenant", headers=headers_for("seller-1")).json()
        assert current["cliente_id"] == "cliente-b"

    def test_selecting_current_cliente_is_unchanged(
        self, client, headers_for, make_profile, add_member, cliente_a
    ):
        seller = make_profile("seller-1", role="salesperson")
        add_member(seller, cliente_a)

        response = client.put(
            "/api/session/tenant",
            json={"cliente_id": "cliente-a"},
            headers=headers_for("seller-1"),
        )

        assert response.json()["changed"] is False

    def test_foreign_cliente_forbidden(
        self, client, headers_for, make_profile, add_member, cliente_a, cliente_b
    ):
        admin = make_profile("admin-1", role="admin")
        add_member(admin, cliente_a)

        response = client.put(
            "/api/session/tenant",
            json={"cliente_id": "cliente-b"},
            headers=headers_for("admin-1"),
        )

        assert response.status_code == 403

    def test_unknown_cliente_not_found(self, client, headers_for, make_profile):
        make_profile("root-1", role="super_admin")

        response = client.put(
            "/api/session/tenant",
            json={"cliente_id": "cliente-zzz"},
            headers=headers_for("root-1"),
        )

        assert response.status_code == 404

    def test_super_admin_selects_any_cliente(
        self, client, headers_for, make_profile, cliente_a, cliente_b
    ):
        make_profile("root-1", role="super_admin")

        response = client.put(
            "/api/session/tenant",
            json={"cliente_id": "cliente-b"},
            headers=headers_for("root-1"),
        )

        assert response.status_code == 200
        assert response.json()["cliente_id"] == "cliente-b"

    def test_clear_selection(
        self, client, db_session, headers_for, make_profile, add_member, cliente_a
    ):
        seller = make_profile("seller-1", role="salesperson")
        add_member(seller, cliente_a)

        response = client.put(
            "/api/session/tenant",
            json={"cliente_id": None},
            headers=headers_for("seller-1"),
        )

        assert response.json() == {"cliente_id": None, "origin": "explicit", "changed": True}
        assert (
            db_session.query(SessionState).filter_by(user_id="seller-1").count() == 0
        )


class TestClientesAndNavigation:
    def test_super_admin_lists_every_cliente(
        self, client, headers_for, make_profile, cliente_a, cliente_b
    ):
        make_profile("root-1", role="super_admin")

        response = client.get("/api/session/clientes", headers=headers_for("root-1"))

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == ["cliente-a", "cliente-b"]

    def test_member_lists_own_clientes(
        self, client, headers_for, make_profile, add_member, cliente_a, cliente_b
    ):
        seller = make_profile("seller-1", role="salesperson")
        add_member(seller, cliente_b)

        response = client.get("/api/session/clientes", headers=headers_for("seller-1"))

        assert [c["nome"] for c in response.json()] == ["Beta Seguros"]

    @pytest.mark.parametrize(
        "role, sees_reports",
        [("salesperson", False), ("manager", True), ("admin", True)],
    )
    def test_navigation_gated_by_role(
        self, client, headers_for, make_profile, add_member, cliente_a, role, sees_reports
    ):
        profile = make_profile("user-1", role=role)
        add_member(profile, cliente_a)

        response = client.get("/api/session/navigation", headers=headers_for("user-1"))

        assert response.status_code == 200
        items = {item["name"]: item for item in response.json()}
        assert ("Relatórios" in items) is sees_reports
        assert items["Leads"]["href"] == "/leads?cliente_id=cliente-a"
