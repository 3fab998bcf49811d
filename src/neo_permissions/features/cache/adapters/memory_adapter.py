"""Memory cache backend for neo-permissions."""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Set

from ..entities.protocols import InvalidationCallback

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with expiry on the monotonic clock."""

    members: Set[str]
    expires_at: Optional[float] = None
    created_at: float = field(default_factory=time.monotonic)

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class MemoryPermissionCacheBackend:
    """Process-local cache backend.

    Published messages are delivered to callbacks registered with ``listen``
    in the same process.
    """

    def __init__(self, monotonic: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, MemoryCacheEntry] = {}
        self._subscribers: Dict[str, List[InvalidationCallback]] = defaultdict(list)
        self._monotonic = monotonic

    async def get_members(self, key: str) -> Optional[Set[str]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._monotonic()):
            del self._entries[key]
            return None
        return set(entry.members)

    async def replace_members(self, key: str, members: Iterable[str], ttl: int) -> None:
        now = self._monotonic()
        self._entries[key] = MemoryCacheEntry(
            members=set(members),
            expires_at=now + ttl if ttl > 0 else None,
            created_at=now,
        )

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def publish(self, channel: str, message: str) -> int:
        callbacks = list(self._subscribers.get(channel, ()))
        for callback in callbacks:
            try:
                await callback(message)
            except Exception as e:
                logger.error(f"Cache subscriber on {channel} failed: {e}")
        return len(callbacks)

    async def listen(self, channel: str, callback: InvalidationCallback) -> None:
        self._subscribers[channel].append(callback)

    def keys(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
