"""Tests for the permission cache backends and service."""

from unittest.mock import AsyncMock

import pytest

from neo_permissions.features.cache.adapters import MemoryPermissionCacheBackend
from neo_permissions.features.cache.services import PermissionCacheService
from neo_permissions.features.events.entities import PermissionChangeEvent


class FakeMonotonic:
    def __init__(self):
        self.value = 1000.0

    def __call__(self):
        return self.value


class TestMemoryPermissionCacheBackend:

    @pytest.mark.asyncio
    async def test_entries_expire(self):
        monotonic = FakeMonotonic()
        backend = MemoryPermissionCacheBackend(monotonic=monotonic)

        await backend.replace_members("permissions:usr_a", {"users:read"}, ttl=60)
        assert await backend.get_members("permissions:usr_a") == {"users:read"}

        monotonic.value += 60
        assert await backend.get_members("permissions:usr_a") is None
        assert backend.keys() == []

    @pytest.mark.asyncio
    async def test_replace_overwrites_members(self, cache_backend):
        await cache_backend.replace_members("k", {"a", "b"}, ttl=60)
        await cache_backend.replace_members("k", {"c"}, ttl=60)

        assert await cache_backend.get_members("k") == {"c"}

    @pytest.mark.asyncio
    async def test_publish_reaches_listeners(self, cache_backend):
        received = []

        async def listener(message):
            received.append(message)

        await cache_backend.listen("chan", listener)

        assert await cache_backend.publish("chan", "usr_a") == 1
        assert await cache_backend.publish("other", "usr_b") == 0
        assert received == ["usr_a"]

    @pytest.mark.asyncio
    async def test_failing_listener_is_logged(self, cache_backend):
        async def broken(message):
            raise RuntimeError("boom")

        await cache_backend.listen("chan", broken)

        assert await cache_backend.publish("chan", "usr_a") == 1


class TestPermissionCacheService:

    @pytest.mark.asyncio
    async def test_put_and_get(self, cache_service, cache_backend):
        await cache_service.put("usr_a", ["users:read", "budgets:read"])

        assert await cache_service.get("usr_a") == {"users:read", "budgets:read"}
        assert cache_backend.keys() == ["permissions:usr_a"]

    @pytest.mark.asyncio
    async def test_empty_set_is_not_cached(self, cache_service, cache_backend):
        await cache_service.put("usr_a", [])

        assert await cache_service.get("usr_a") is None
        assert cache_backend.keys() == []

    @pytest.mark.asyncio
    async def test_backend_failures_are_swallowed(self):
        backend = AsyncMock()
        backend.get_members.side_effect = ConnectionError("down")
        backend.replace_members.side_effect = ConnectionError("down")
        backend.delete.side_effect = ConnectionError("down")
        service = PermissionCacheService(backend)

        assert await service.get("usr_a") is None
        await service.put("usr_a", {"users:read"})
        await service.invalidate("usr_a")
        await service.evict_local("usr_a")

    @pytest.mark.asyncio
    async def test_invalidate_deletes_and_broadcasts(self, cache_service, cache_backend):
        evicted = []

        async def listener(user_id):
            evicted.append(user_id)

        await cache_backend.listen(cache_service.channel, listener)
        await cache_service.put("usr_a", {"users:read"})

        await cache_service.invalidate("usr_a")

        assert await cache_service.get("usr_a") is None
        assert evicted == ["usr_a"]

    @pytest.mark.asyncio
    async def test_evict_local_does_not_broadcast(self, cache_service, cache_backend):
        evicted = []

        async def listener(user_id):
            evicted.append(user_id)

        await cache_backend.listen(cache_service.channel, listener)
        await cache_service.put("usr_a", {"users:read"})

        await cache_service.evict_local("usr_a")

        assert await cache_service.get("usr_a") is None
        assert evicted == []

    @pytest.mark.asyncio
    async def test_invalidate_users_drops_all_targets(self, cache_service):
        for user_id in ("usr_a", "usr_b", "usr_plain"):
            await cache_service.put(user_id, {"users:read"})
        event = PermissionChangeEvent.role_permission_revoked(
            "MANAGER", "users:read", "usr_admin", ["usr_a", "usr_b"]
        )

        await cache_service.invalidate_users(event.invalidation_targets())

        assert await cache_service.get("usr_a") is None
        assert await cache_service.get("usr_b") is None
        assert await cache_service.get("usr_plain") == {"users:read"}

    @pytest.mark.asyncio
    async def test_assignment_invalidates_on_commit(self, uow, governor, cache_service):
        uow.set_invalidator(cache_service.invalidate_users)
        await cache_service.put("usr_plain", {"budgets:read"})

        await governor.assign_role("usr_plain", "AUDITOR", "usr_org_admin")

        assert await cache_service.get("usr_plain") is None

    @pytest.mark.asyncio
    async def test_write_from_before_invalidation_is_skipped(self, cache_service):
        generation = cache_service.generation("usr_a")
        await cache_service.invalidate("usr_a")

        await cache_service.put("usr_a", {"users:read"}, generation=generation)

        assert await cache_service.get("usr_a") is None

    @pytest.mark.asyncio
    async def test_write_racing_invalidation_is_undone(self, cache_backend):
        service = PermissionCacheService(cache_backend, ttl=300)
        replace_members = cache_backend.replace_members

        async def replace_then_invalidate(key, members, ttl):
            await replace_members(key, members, ttl)
            await service.evict_local("usr_a")

        cache_backend.replace_members = replace_then_invalidate
        generation = service.generation("usr_a")

        await service.put("usr_a", {"users:read"}, generation=generation)

        assert await service.get("usr_a") is None

    @pytest.mark.asyncio
    async def test_current_generation_write_is_kept(self, cache_service):
        await cache_service.invalidate("usr_a")
        generation = cache_service.generation("usr_a")

        await cache_service.put("usr_a", {"users:read"}, generation=generation)

        assert await cache_service.get("usr_a") == {"users:read"}

    def test_key_for(self):
        service = PermissionCacheService(MemoryPermissionCacheBackend(), key_prefix="perm:")

        assert service.key_for("usr_a") == "perm:usr_a"
