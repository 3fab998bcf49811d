"""User services."""

from .user_service import UserService
from .user_sync_service import UserSyncService

__all__ = ["UserService", "UserSyncService"]
