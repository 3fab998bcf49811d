"""Event services."""

from .event_dispatcher_service import EventDispatcherService

__all__ = ["EventDispatcherService"]
