"""Storage adapters."""

from .memory_store import InMemoryStore
from .memory_unit_of_work import MemoryUnitOfWork
from .asyncpg_unit_of_work import AsyncPGUnitOfWork

__all__ = ["InMemoryStore", "MemoryUnitOfWork", "AsyncPGUnitOfWork"]
