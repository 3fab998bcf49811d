"""Tests for service wiring and lifecycle."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from neo_permissions.container import ServiceContainer
from neo_permissions.core.exceptions import CacheError
from neo_permissions.features.cache.adapters import MemoryPermissionCacheBackend
from neo_permissions.features.storage.adapters import MemoryUnitOfWork


class TestCacheConsistency:

    @pytest.mark.asyncio
    async def test_revoked_role_is_not_served_from_cache(self, container):
        await container.startup()
        try:
            assert await container.permissions.has_permission("usr_plain", "transactions:read")

            await container.permissions.revoke_role("usr_plain", "USER", "usr_org_admin")

            assert not await container.permissions.has_permission("usr_plain", "transactions:read")
        finally:
            await container.shutdown()

    @pytest.mark.asyncio
    async def test_deleted_role_is_not_served_from_cache(self, container):
        await container.startup()
        try:
            assert await container.permissions.has_permission("usr_a", "transactions:approve")

            await container.roles.delete_role("MANAGER", "usr_admin")

            assert not await container.permissions.has_permission("usr_a", "transactions:approve")
        finally:
            await container.shutdown()

    @pytest.mark.asyncio
    async def test_deleted_user_is_not_served_from_cache(self, container):
        await container.startup()
        try:
            assert await container.permissions.has_permission("usr_plain", "transactions:read")

            await container.users.delete_user("usr_plain", "usr_admin")

            assert not await container.permissions.has_permission("usr_plain", "transactions:read")
        finally:
            await container.shutdown()


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_startup_survives_unreachable_invalidation_channel(self, store, settings, clock):
        backend = MemoryPermissionCacheBackend()
        backend.listen = AsyncMock(side_effect=CacheError("connection refused"))
        container = ServiceContainer(
            MemoryUnitOfWork(store), cache_backend=backend, settings=settings, clock=clock
        )

        await container.startup()
        try:
            backend.listen.assert_awaited_once()
            assert await container.permissions.has_permission("usr_plain", "transactions:read")
        finally:
            await container.shutdown()

    @pytest.mark.asyncio
    async def test_health_without_database(self, container):
        assert await container.health() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_health_reports_database(self, store, settings, clock):
        database = MagicMock()
        database.health_check = AsyncMock(return_value=False)
        container = ServiceContainer(
            MemoryUnitOfWork(store), settings=settings, clock=clock, database=database
        )

        assert await container.health() == {"status": "degraded", "database": "unavailable"}
