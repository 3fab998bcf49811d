"""Redis cache backend for neo-permissions."""

import asyncio
import logging
from typing import Iterable, List, Optional, Set

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ....core.exceptions import CacheError
from ..entities.protocols import InvalidationCallback

logger = logging.getLogger(__name__)


class RedisPermissionCacheBackend:
    """Stores each user's permission ids as a Redis set.

    ``listen`` starts a pub/sub reader task so invalidations broadcast by other
    instances reach this process.
    """

    def __init__(self, client: Redis):
        self.client = client
        self._listeners: List[asyncio.Task] = []

    @classmethod
    def from_url(cls, url: str) -> "RedisPermissionCacheBackend":
        return cls(redis.from_url(url, decode_responses=True))

    async def get_members(self, key: str) -> Optional[Set[str]]:
        try:
            # SMEMBERS cannot tell an empty set from a missing key, and empty sets are never stored.
            members = await self.client.smembers(key)
        except RedisError as e:
            raise CacheError(f"Failed to read {key}: {e}") from e
        if not members:
            return None
        return {self._decode(member) for member in members}

    async def replace_members(self, key: str, members: Iterable[str], ttl: int) -> None:
        values = list(members)
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                if values:
                    pipe.sadd(key, *values)
                    if ttl > 0:
                        pipe.expire(key, ttl)
                await pipe.execute()
        except RedisError as e:
            raise CacheError(f"Failed to write {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self.client.delete(key))
        except RedisError as e:
            raise CacheError(f"Failed to delete {key}: {e}") from e

    async def publish(self, channel: str, message: str) -> int:
        try:
            return await self.client.publish(channel, message)
        except RedisError as e:
            raise CacheError(f"Failed to publish on {channel}: {e}") from e

    async def listen(self, channel: str, callback: InvalidationCallback) -> None:
        pubsub = self.client.pubsub()
        try:
            await pubsub.subscribe(channel)
        except RedisError as e:
            await pubsub.aclose()
            raise CacheError(f"Failed to subscribe to {channel}: {e}") from e
        self._listeners.append(asyncio.create_task(self._read(pubsub, channel, callback)))
        logger.info(f"Listening for cache invalidations on {channel}")

    async def _read(self, pubsub, channel: str, callback: InvalidationCallback) -> None:
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    await callback(self._decode(message["data"]))
                except Exception as e:
                    logger.error(f"Invalidation callback on {channel} failed: {e}")
        finally:
            await pubsub.aclose()

    async def close(self) -> None:
        for task in self._listeners:
            task.cancel()
        await asyncio.gather(*self._listeners, return_exceptions=True)
        self._listeners.clear()
        await self.client.aclose()

    @staticmethod
    def _decode(value) -> str:
        return value.decode() if isinstance(value, bytes) else str(value)
