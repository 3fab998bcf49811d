"""User entities and protocols."""

from .user import User
from .protocols import UserRepository

__all__ = ["User", "UserRepository"]
