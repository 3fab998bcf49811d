"""Protocol interfaces for audit log storage."""

from abc import abstractmethod
from datetime import datetime
from typing import List, Protocol, runtime_checkable

from .audit_log import AuthorizationAuditLog


@runtime_checkable
class AuditLogRepository(Protocol):
    """Append-only storage for audit entries. Queries return newest first."""

    @abstractmethod
    async def append(self, entry: AuthorizationAuditLog) -> AuthorizationAuditLog:
        ...

    @abstractmethod
    async def find_by_user(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> List[AuthorizationAuditLog]:
        ...

    @abstractmethod
    async def find_by_time_range(
        self, start: datetime, end: datetime, limit: int = 50, offset: int = 0
    ) -> List[AuthorizationAuditLog]:
        ...

    @abstractmethod
    async def find_all(self, limit: int = 50, offset: int = 0) -> List[AuthorizationAuditLog]:
        ...
