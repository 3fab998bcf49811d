"""Tests for the permission catalog."""

import pytest

from neo_permissions.core.exceptions import DuplicateResourceError, PermissionNotFoundError
from neo_permissions.features.permissions.services import PermissionCatalogService


@pytest.fixture
def catalog(uow, cascade, clock):
    return PermissionCatalogService(uow, cascade, clock)


class TestPermissionCatalogService:

    @pytest.mark.asyncio
    async def test_create_derives_resource_and_action(self, catalog):
        permission = await catalog.create_permission("invoices:approve", "Approve Invoices")

        assert permission.resource_type == "invoices"
        assert permission.action == "approve"

    @pytest.mark.asyncio
    async def test_create_without_convention(self, catalog):
        permission = await catalog.create_permission("superpower", "Superpower")

        assert permission.resource_type is None
        assert permission.action is None

    @pytest.mark.asyncio
    async def test_duplicate_id(self, catalog):
        with pytest.raises(DuplicateResourceError):
            await catalog.create_permission("users:read", "Read Users")

    @pytest.mark.asyncio
    async def test_list_by_resource_type(self, catalog):
        permissions = await catalog.list_permissions("budget")

        assert {p.id for p in permissions} == {"budgets:read", "budgets:write", "budgets:delete"}

    @pytest.mark.asyncio
    async def test_delete_cascades_through_roles(self, catalog, store):
        result = await catalog.delete_permission("audit:read", "usr_admin")

        assert result.affected_role_ids == {"SYSTEM_ADMIN", "ORG_ADMIN", "AUDITOR"}
        assert result.affected_user_ids == {"usr_admin", "usr_org_admin"}
        assert store.permissions["audit:read"].deleted is True
        with pytest.raises(PermissionNotFoundError):
            await catalog.get_permission("audit:read")

    @pytest.mark.asyncio
    async def test_restore(self, catalog, store):
        await catalog.delete_permission("audit:read", "usr_admin")

        permission = await catalog.restore_permission("audit:read")

        assert permission.deleted is False
        assert not [
            r for r in store.role_permissions.values()
            if r.permission_id == "audit:read" and r.revoked_at is None
        ]

    @pytest.mark.asyncio
    async def test_unknown_permission(self, catalog):
        with pytest.raises(PermissionNotFoundError):
            await catalog.delete_permission("nope:nope", "usr_admin")
