"""Protocol interface for the unit of work."""

from abc import abstractmethod
from typing import AsyncContextManager, Protocol, runtime_checkable

from .session import StorageSession


@runtime_checkable
class UnitOfWork(Protocol):
    """Opens atomic transactions over the whole authorization store."""

    @abstractmethod
    def transaction(self) -> AsyncContextManager[StorageSession]:
        """Yield a session. Commit on clean exit, roll back on any exception."""
        ...
