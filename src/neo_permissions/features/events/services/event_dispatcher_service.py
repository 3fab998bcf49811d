"""Event dispatcher service.

Committed permission change events are queued and delivered to subscribers by
one background task. Publishing never blocks and never fails the caller.
"""

import asyncio
import logging
from typing import List, Optional

from ..entities.permission_change_event import PermissionChangeEvent
from ..entities.protocols import EventHandler

logger = logging.getLogger(__name__)


class EventDispatcherService:
    """In-process outbox drained by a single delivery task.

    Subscribers are called in registration order. A failing subscriber is
    logged and skipped; the others still receive the event.
    """

    def __init__(self, max_queue_size: int = 0):
        self._queue: "asyncio.Queue[PermissionChangeEvent]" = asyncio.Queue(maxsize=max_queue_size)
        self._handlers: List[EventHandler] = []
        self._worker: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def publish(self, event: PermissionChangeEvent) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.error(f"Event queue full, dropping {event.action.value} event")

    async def start(self) -> None:
        if self.is_running:
            return
        self._worker = asyncio.create_task(self._run())
        logger.info(f"Event dispatcher started with {len(self._handlers)} subscribers")

    async def stop(self) -> None:
        """Deliver everything already queued, then stop the worker."""
        if self._worker is None:
            return
        await self._queue.join()
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.info("Event dispatcher stopped")

    async def join(self) -> None:
        """Wait until every queued event has been delivered."""
        await self._queue.join()

    async def dispatch(self, event: PermissionChangeEvent) -> None:
        """Deliver one event to every subscriber."""
        for handler in list(self._handlers):
            try:
                await handler(event)
            except Exception as e:
                name = getattr(handler, "__qualname__", repr(handler))
                logger.error(f"Subscriber {name} failed on {event.action.value} event: {e}")

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self.dispatch(event)
            finally:
                self._queue.task_done()
