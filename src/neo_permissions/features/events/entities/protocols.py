"""Protocol interfaces for event delivery."""

from typing import Awaitable, Callable, Protocol, runtime_checkable

from .permission_change_event import PermissionChangeEvent

EventHandler = Callable[[PermissionChangeEvent], Awaitable[None]]


@runtime_checkable
class EventPublisher(Protocol):
    """Anything that accepts committed events for asynchronous delivery."""

    def publish(self, event: PermissionChangeEvent) -> None:
        """Enqueue an event without blocking the caller."""
        ...
