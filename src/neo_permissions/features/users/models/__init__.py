"""User API models."""

from .requests import SyncUserRequest
from .responses import UserResponse

__all__ = ["SyncUserRequest", "UserResponse"]
