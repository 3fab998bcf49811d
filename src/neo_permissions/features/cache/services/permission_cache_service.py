"""Permission cache service.

A cache failure must never fail an authorization operation, so every backend
error is logged and turned into a miss or a no-op.
"""

import logging
from typing import Dict, Iterable, Optional, Set

from ..entities.protocols import PermissionCacheBackend

logger = logging.getLogger(__name__)


class PermissionCacheService:
    """Caches effective permission ids per user.

    Every invalidation bumps a per-user generation. A reader that resolved
    permissions before an invalidation passes the generation it started with
    to ``put``, and a stale result is never written back.
    """

    def __init__(
        self,
        backend: PermissionCacheBackend,
        ttl: int = 300,
        key_prefix: str = "permissions:",
        channel: str = "permission-invalidation",
    ):
        self.backend = backend
        self.ttl = ttl
        self.key_prefix = key_prefix
        self.channel = channel
        self._generations: Dict[str, int] = {}

    def key_for(self, user_id: str) -> str:
        return f"{self.key_prefix}{user_id}"

    def generation(self, user_id: str) -> int:
        return self._generations.get(user_id, 0)

    def _bump(self, user_id: str) -> None:
        self._generations[user_id] = self.generation(user_id) + 1

    async def get(self, user_id: str) -> Optional[Set[str]]:
        try:
            return await self.backend.get_members(self.key_for(user_id))
        except Exception as e:
            logger.warning(f"Permission cache read failed for user {user_id}: {e}")
            return None

    async def put(
        self,
        user_id: str,
        permissions: Iterable[str],
        ttl: Optional[int] = None,
        generation: Optional[int] = None,
    ) -> None:
        """Cache a non-empty permission set. Empty sets are not cached.

        With ``generation`` the write is skipped, or undone, when the user was
        invalidated after that generation was read.
        """
        values = set(permissions)
        if not values:
            return
        if generation is not None and generation != self.generation(user_id):
            logger.debug(f"Skipping stale permission cache write for user {user_id}")
            return
        key = self.key_for(user_id)
        try:
            await self.backend.replace_members(key, values, self.ttl if ttl is None else ttl)
            if generation is not None and generation != self.generation(user_id):
                await self.backend.delete(key)
        except Exception as e:
            logger.warning(f"Permission cache write failed for user {user_id}: {e}")

    async def invalidate(self, user_id: str) -> None:
        """Drop the user's entry and broadcast the invalidation to other instances."""
        self._bump(user_id)
        try:
            await self.backend.delete(self.key_for(user_id))
            await self.backend.publish(self.channel, user_id)
        except Exception as e:
            logger.warning(f"Permission cache invalidation failed for user {user_id}: {e}")

    async def invalidate_users(self, user_ids: Iterable[str]) -> None:
        """Post-commit hook of the unit of work."""
        targets = sorted(set(user_ids))
        for user_id in targets:
            await self.invalidate(user_id)
        if targets:
            logger.debug(f"Invalidated permission cache for {len(targets)} users")

    async def evict_local(self, user_id: str) -> None:
        """Handle an invalidation received from the broadcast channel."""
        self._bump(user_id)
        try:
            await self.backend.delete(self.key_for(user_id))
        except Exception as e:
            logger.warning(f"Permission cache eviction failed for user {user_id}: {e}")
