"""Unit of work over the in-process store."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from ...events.entities.protocols import EventPublisher
from ..entities.session import StorageSession
from ..services.unit_of_work import BaseUnitOfWork
from .memory_store import (
    InMemoryStore,
    MemoryAuditLogRepository,
    MemoryDelegationRepository,
    MemoryPermissionRepository,
    MemoryResourcePermissionRepository,
    MemoryRolePermissionRepository,
    MemoryRoleRepository,
    MemoryUserRepository,
    MemoryUserRoleRepository,
)

logger = logging.getLogger(__name__)


class MemoryUnitOfWork(BaseUnitOfWork):
    """Serialises transactions with a lock and rolls back by restoring a snapshot.

    Transactions do not nest: services pass the open session down instead of
    opening a second transaction.
    """

    def __init__(self, store: Optional[InMemoryStore] = None, publisher: Optional[EventPublisher] = None):
        super().__init__(publisher)
        self.store = store or InMemoryStore()
        self._lock = asyncio.Lock()

    def _session(self) -> StorageSession:
        return StorageSession(
            users=MemoryUserRepository(self.store),
            roles=MemoryRoleRepository(self.store),
            permissions=MemoryPermissionRepository(self.store),
            user_roles=MemoryUserRoleRepository(self.store),
            role_permissions=MemoryRolePermissionRepository(self.store),
            resource_permissions=MemoryResourcePermissionRepository(self.store),
            delegations=MemoryDelegationRepository(self.store),
            audit_logs=MemoryAuditLogRepository(self.store),
        )

    @asynccontextmanager
    async def _open_session(self) -> AsyncIterator[StorageSession]:
        async with self._lock:
            snapshot = self.store.snapshot()
            try:
                yield self._session()
            except BaseException:
                self.store.restore(snapshot)
                logger.debug("Memory transaction rolled back")
                raise
