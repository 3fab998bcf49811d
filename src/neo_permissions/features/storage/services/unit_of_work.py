"""Unit of work base with a post-commit event outbox."""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Awaitable, Callable, FrozenSet, Optional, Set

from ...events.entities.protocols import EventPublisher
from ..entities.session import StorageSession

logger = logging.getLogger(__name__)

InvalidationHook = Callable[[FrozenSet[str]], Awaitable[None]]


class BaseUnitOfWork(ABC):
    """Runs a storage transaction and releases its staged events after commit.

    Once the transaction commits, the invalidation hook is awaited for every
    user whose permissions changed, before ``transaction()`` returns control to
    the caller. The events are then handed to the publisher for asynchronous
    delivery.
    """

    def __init__(
        self,
        publisher: Optional[EventPublisher] = None,
        invalidator: Optional[InvalidationHook] = None,
    ):
        self.publisher = publisher
        self.invalidator = invalidator

    def set_publisher(self, publisher: Optional[EventPublisher]) -> None:
        self.publisher = publisher

    def set_invalidator(self, invalidator: Optional[InvalidationHook]) -> None:
        self.invalidator = invalidator

    @abstractmethod
    def _open_session(self) -> AsyncContextManager[StorageSession]:
        """Begin a backend transaction; commit on clean exit, roll back otherwise."""
        ...

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StorageSession]:
        async with self._open_session() as session:
            yield session
        # Only reached after commit; a rollback re-raises out of the block above.
        await self._release(session)

    async def _release(self, session: StorageSession) -> None:
        events = list(session.pending_events)
        session.pending_events.clear()
        if not events:
            return

        await self._invalidate(events)

        if self.publisher is None:
            logger.debug(f"Dropping {len(events)} committed events, no publisher attached")
            return
        for event in events:
            try:
                self.publisher.publish(event)
            except Exception as e:
                logger.error(f"Failed to publish {event.action.value} event: {e}")

    async def _invalidate(self, events) -> None:
        if self.invalidator is None:
            return
        targets: Set[str] = set()
        for event in events:
            targets.update(event.invalidation_targets())
        if not targets:
            return
        try:
            await self.invalidator(frozenset(targets))
        except Exception as e:
            logger.error(f"Post-commit cache invalidation failed for {sorted(targets)}: {e}")
