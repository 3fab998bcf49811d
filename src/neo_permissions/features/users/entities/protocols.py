"""Protocol interfaces for user storage."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .user import User


@runtime_checkable
class UserRepository(Protocol):
    """Storage contract for users."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a non-deleted user."""
        ...

    @abstractmethod
    async def get_by_id_including_deleted(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def get_by_external_subject(self, subject: str) -> Optional[User]:
        """Get a user by identity-provider subject, soft-deleted users included.

        A non-deleted match wins over a deleted one.
        """
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a non-deleted user by email."""
        ...

    @abstractmethod
    async def list_active(self) -> List[User]:
        ...

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert or update."""
        ...
