"""Event entities."""

from .permission_change_event import PermissionChangeEvent
from .protocols import EventHandler, EventPublisher

__all__ = ["PermissionChangeEvent", "EventHandler", "EventPublisher"]
