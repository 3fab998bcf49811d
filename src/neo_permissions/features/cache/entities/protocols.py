"""Cache protocols for neo-permissions.

Effective permissions are cached per user as a set of permission ids. The
backend contract is deliberately set-shaped so it maps onto Redis sets.
"""

from abc import abstractmethod
from typing import Awaitable, Callable, Iterable, Optional, Protocol, Set, runtime_checkable

InvalidationCallback = Callable[[str], Awaitable[None]]


@runtime_checkable
class PermissionCacheBackend(Protocol):
    """Set-valued key store with expiry and a broadcast channel."""

    @abstractmethod
    async def get_members(self, key: str) -> Optional[Set[str]]:
        """Return the cached set, or None on a miss."""
        ...

    @abstractmethod
    async def replace_members(self, key: str, members: Iterable[str], ttl: int) -> None:
        """Atomically replace the set stored at ``key`` and set its expiry."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        ...

    @abstractmethod
    async def publish(self, channel: str, message: str) -> int:
        """Broadcast a message; returns the number of receivers when known."""
        ...
