"""Cache entities and protocols."""

from .protocols import InvalidationCallback, PermissionCacheBackend

__all__ = ["InvalidationCallback", "PermissionCacheBackend"]
