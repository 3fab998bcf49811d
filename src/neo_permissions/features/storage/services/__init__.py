"""Storage services."""

from .unit_of_work import BaseUnitOfWork, InvalidationHook

__all__ = ["BaseUnitOfWork", "InvalidationHook"]
