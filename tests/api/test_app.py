"""HTTP surface tests over the in-memory container."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from neo_permissions.api.app import create_app
from neo_permissions.container import ServiceContainer
from neo_permissions.features.storage.adapters import MemoryUnitOfWork

ADMIN = {"X-User-Id": "usr_admin"}
ORG_ADMIN = {"X-User-Id": "usr_org_admin"}


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "database" not in response.json()

    def test_health_reports_database(self, store, settings, clock):
        database = MagicMock()
        database.create_pool = AsyncMock()
        database.close_pool = AsyncMock()
        database.health_check = AsyncMock(return_value=True)
        container = ServiceContainer(
            MemoryUnitOfWork(store), settings=settings, clock=clock, database=database
        )

        with TestClient(create_app(container)) as test_client:
            response = test_client.get("/health")

        assert response.json()["status"] == "ok"
        assert response.json()["database"] == "ok"
        database.health_check.assert_awaited_once()


class TestUserEndpoints:

    def test_get_user(self, client):
        response = client.get("/v1/users/usr_a")

        assert response.status_code == 200
        assert response.json()["email"] == "usr_a@example.com"

    def test_unknown_user_is_404(self, client):
        response = client.get("/v1/users/usr_missing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    def test_effective_permissions(self, client):
        response = client.get("/v1/users/usr_a/permissions")

        body = response.json()
        assert response.status_code == 200
        assert "transactions:approve" in body["permissions"]
        assert body["point_in_time"] is None

    def test_point_in_time_before_assignment(self, client):
        response = client.get("/v1/users/usr_a/permissions", params={"at": "2024-05-01T00:00:00Z"})

        assert response.status_code == 200
        assert response.json()["permissions"] == []

    def test_permission_check(self, client):
        allowed = client.get("/v1/users/usr_a/permissions/check", params={"permission": "transactions:approve"})
        denied = client.get("/v1/users/usr_a/permissions/check", params={"permission": "users:delete"})

        assert allowed.json()["allowed"] is True
        assert denied.json()["allowed"] is False

    def test_permission_check_is_audited(self, client, store):
        client.get("/v1/users/usr_plain/permissions/check", params={"permission": "users:delete"})

        decisions = [(e.action, e.decision.value) for e in store.audit_logs.values() if e.user_id == "usr_plain"]
        assert ("users:delete", "DENIED") in decisions

    def test_sync_user(self, client):
        response = client.post(
            "/v1/users/sync",
            json={"external_subject": "idp|new", "email": "new@example.com", "display_name": "New"},
        )

        assert response.status_code == 200
        assert response.json()["id"].startswith("usr_")

    def test_delete_user_returns_cascade_summary(self, client):
        response = client.delete("/v1/users/usr_b", headers=ADMIN)

        body = response.json()
        assert response.status_code == 200
        assert body["entity_type"] == "user"
        assert body["revoked_user_roles"] == 1
        assert client.get("/v1/users/usr_b").status_code == 404

    def test_acting_user_header_required(self, client):
        response = client.delete("/v1/users/usr_b")

        assert response.status_code == 422


class TestRoleAssignmentEndpoints:

    def test_assign_basic_role(self, client):
        response = client.post("/v1/users/usr_plain/roles", json={"role_id": "AUDITOR"}, headers=ORG_ADMIN)

        assert response.status_code == 201
        assert response.json()["granted_by"] == "usr_org_admin"
        roles = client.get("/v1/users/usr_plain/roles").json()
        assert {role["id"] for role in roles} == {"AUDITOR", "USER"}

    def test_protected_role_is_forbidden(self, client):
        response = client.post("/v1/users/usr_plain/roles", json={"role_id": "SYSTEM_ADMIN"}, headers=ADMIN)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "PROTECTED_ROLE_VIOLATION"

    def test_elevated_role_needs_elevated_permission(self, client):
        response = client.post("/v1/users/usr_plain/roles", json={"role_id": "MANAGER"}, headers=ORG_ADMIN)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSION_FOR_ELEVATED_ROLE"

    def test_duplicate_assignment_is_conflict(self, client):
        response = client.post("/v1/users/usr_a/roles", json={"role_id": "MANAGER"}, headers=ADMIN)

        assert response.status_code == 409

    def test_revoke_role(self, client):
        response = client.delete("/v1/users/usr_plain/roles/USER", headers=ORG_ADMIN)

        assert response.status_code == 200
        assert response.json()["revoked_by"] == "usr_org_admin"


class TestCatalogEndpoints:

    def test_create_and_delete_role(self, client):
        created = client.post("/v1/roles", json={"name": "Treasurer"})
        role_id = created.json()["id"]

        deleted = client.delete(f"/v1/roles/{role_id}", headers=ADMIN)

        assert created.status_code == 201
        assert deleted.status_code == 200
        assert deleted.json()["entity_type"] == "role"

    def test_duplicate_role_name_is_conflict(self, client):
        response = client.post("/v1/roles", json={"name": "Manager"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_RESOURCE"

    def test_list_permissions_by_resource_type(self, client):
        response = client.get("/v1/permissions", params={"resource_type": "budget"})

        assert {p["id"] for p in response.json()} == {"budgets:read", "budgets:write", "budgets:delete"}

    def test_role_permissions(self, client):
        response = client.get("/v1/roles/MANAGER/permissions")

        assert response.status_code == 200
        assert "transactions:approve" in response.json()["permission_ids"]


class TestDelegationAndResourceEndpoints:

    def test_delegation_flow(self, client):
        created = client.post(
            "/v1/delegations",
            json={"delegatee_id": "usr_b", "scope": "read_only"},
            headers={"X-User-Id": "usr_a"},
        )

        assert created.status_code == 201
        assert created.json()["delegator_id"] == "usr_a"
        summary = client.get("/v1/users/usr_b/delegations").json()
        assert [d["delegator_id"] for d in summary["received"]] == ["usr_a"]

    def test_unknown_scope_is_400(self, client):
        response = client.post(
            "/v1/delegations",
            json={"delegatee_id": "usr_b", "scope": "everything"},
            headers={"X-User-Id": "usr_a"},
        )

        assert response.status_code == 400

    def test_resource_grant(self, client):
        response = client.post(
            "/v1/resource-permissions",
            json={
                "user_id": "usr_plain",
                "resource_type": "transaction",
                "resource_id": "txn_1",
                "permission": "approve",
            },
            headers=ADMIN,
        )

        assert response.status_code == 201
        grants = client.get("/v1/users/usr_plain/resource-permissions").json()
        assert [(g["resource_id"], g["permission"]) for g in grants] == [("txn_1", "approve")]


class TestAuditEndpoint:

    def test_query_validates_limit(self, client):
        assert client.get("/v1/audit", params={"limit": 0}).status_code == 422

    def test_query_by_user(self, client):
        client.get("/v1/users/usr_a/permissions/check", params={"permission": "users:read"})

        body = client.get("/v1/audit", params={"user_id": "usr_a"}).json()

        assert body["limit"] == 50
        assert body["entries"][0]["action"] == "users:read"
