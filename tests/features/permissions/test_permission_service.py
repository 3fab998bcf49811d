"""Tests for the permission query facade."""

from unittest.mock import AsyncMock

import pytest

from neo_permissions.features.cache.adapters import MemoryPermissionCacheBackend
from neo_permissions.features.cache.services import PermissionCacheService
from neo_permissions.features.permissions.services import PermissionService


@pytest.fixture
def permission_service(uow, resolver, governor, cache_service, clock):
    return PermissionService(uow, resolver, governor, cache_service, clock)


class TestPermissionService:

    @pytest.mark.asyncio
    async def test_has_permission_populates_cache(self, permission_service, cache_service):
        assert await permission_service.has_permission("usr_a", "transactions:approve")
        assert not await permission_service.has_permission("usr_a", "users:delete")

        cached = await cache_service.get("usr_a")
        assert "transactions:approve" in cached

    @pytest.mark.asyncio
    async def test_cached_answer_is_served(self, permission_service, cache_service, resolver):
        await cache_service.put("usr_a", {"made:up"})
        resolver.get_effective_permissions = AsyncMock()

        assert await permission_service.has_permission("usr_a", "made:up")
        resolver.get_effective_permissions.assert_not_called()

    @pytest.mark.asyncio
    async def test_works_without_cache(self, uow, resolver, governor, clock):
        service = PermissionService(uow, resolver, governor, None, clock)

        assert await service.has_permission("usr_plain", "budgets:write")

    @pytest.mark.asyncio
    async def test_broken_cache_falls_back_to_resolver(self, uow, resolver, governor, clock):
        backend = MemoryPermissionCacheBackend()
        backend.get_members = AsyncMock(side_effect=ConnectionError("redis down"))
        backend.replace_members = AsyncMock(side_effect=ConnectionError("redis down"))
        service = PermissionService(uow, resolver, governor, PermissionCacheService(backend), clock)

        assert await service.has_permission("usr_plain", "budgets:write")

    @pytest.mark.asyncio
    async def test_user_without_permissions_is_not_cached(self, permission_service, cache_service):
        assert not await permission_service.has_permission("usr_missing", "users:read")

        assert await cache_service.get("usr_missing") is None

    @pytest.mark.asyncio
    async def test_get_user_roles_skips_deleted_roles(self, permission_service, store, give_role, clock):
        give_role("usr_a", "AUDITOR")
        store.roles["AUDITOR"].mark_deleted("usr_admin", clock())

        roles = await permission_service.get_user_roles("usr_a")

        assert [role.id for role in roles] == ["MANAGER"]

    @pytest.mark.asyncio
    async def test_assign_and_revoke_delegate_to_governor(self, permission_service, make_user):
        make_user("usr_1")

        assigned = await permission_service.assign_role("usr_1", "AUDITOR", "usr_org_admin")
        revoked = await permission_service.revoke_role("usr_1", "AUDITOR", "usr_org_admin")

        assert assigned.id == revoked.id
        assert revoked.revoked_at is not None

    @pytest.mark.asyncio
    async def test_resolution_overtaken_by_invalidation_is_not_cached(
        self, permission_service, cache_service, resolver
    ):
        resolve = resolver.get_effective_permissions

        async def resolve_then_revoke(user_id):
            permissions = await resolve(user_id)
            await cache_service.invalidate(user_id)
            return permissions

        resolver.get_effective_permissions = resolve_then_revoke

        assert await permission_service.has_permission("usr_a", "transactions:approve")
        assert await cache_service.get("usr_a") is None
