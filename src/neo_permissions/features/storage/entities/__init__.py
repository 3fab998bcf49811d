"""Storage entities and protocols."""

from .session import StorageSession
from .protocols import UnitOfWork

__all__ = ["StorageSession", "UnitOfWork"]
