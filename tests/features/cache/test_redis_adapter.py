"""Tests for the Redis cache backend against a mocked client."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from neo_permissions.core.exceptions import CacheError
from neo_permissions.features.cache.adapters import RedisPermissionCacheBackend


@pytest.fixture
def client():
    client = MagicMock()
    client.smembers = AsyncMock(return_value={"users:read", b"budgets:read"})
    client.delete = AsyncMock(return_value=1)
    client.publish = AsyncMock(return_value=2)
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[])
    client.pipeline.return_value.__aenter__.return_value = pipe
    client.pipe = pipe
    return client


class TestRedisPermissionCacheBackend:

    @pytest.mark.asyncio
    async def test_get_members_decodes(self, client):
        backend = RedisPermissionCacheBackend(client)

        assert await backend.get_members("permissions:usr_a") == {"users:read", "budgets:read"}

    @pytest.mark.asyncio
    async def test_empty_set_is_a_miss(self, client):
        client.smembers.return_value = set()
        backend = RedisPermissionCacheBackend(client)

        assert await backend.get_members("permissions:usr_a") is None

    @pytest.mark.asyncio
    async def test_replace_members_uses_one_transaction(self, client):
        backend = RedisPermissionCacheBackend(client)

        await backend.replace_members("permissions:usr_a", ["users:read"], ttl=300)

        client.pipeline.assert_called_once_with(transaction=True)
        client.pipe.delete.assert_called_once_with("permissions:usr_a")
        client.pipe.sadd.assert_called_once_with("permissions:usr_a", "users:read")
        client.pipe.expire.assert_called_once_with("permissions:usr_a", 300)
        client.pipe.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_and_publish(self, client):
        backend = RedisPermissionCacheBackend(client)

        assert await backend.delete("permissions:usr_a") is True
        assert await backend.publish("permission-invalidation", "usr_a") == 2

    @pytest.mark.asyncio
    async def test_redis_errors_become_cache_errors(self, client):
        client.smembers.side_effect = RedisConnectionError("refused")
        backend = RedisPermissionCacheBackend(client)

        with pytest.raises(CacheError):
            await backend.get_members("permissions:usr_a")

    @pytest.mark.asyncio
    async def test_failed_subscribe_becomes_cache_error(self, client):
        pubsub = MagicMock()
        pubsub.subscribe = AsyncMock(side_effect=RedisConnectionError("refused"))
        pubsub.aclose = AsyncMock()
        client.pubsub.return_value = pubsub
        backend = RedisPermissionCacheBackend(client)

        with pytest.raises(CacheError):
            await backend.listen("permission-invalidation", AsyncMock())

        pubsub.aclose.assert_awaited_once()
        assert backend._listeners == []
