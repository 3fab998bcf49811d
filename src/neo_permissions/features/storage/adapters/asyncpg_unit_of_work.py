"""Unit of work over a PostgreSQL connection pool."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from ....core.exceptions import TransactionError
from ....database.connection import DatabaseManager
from ...assignments.repositories import (
    AsyncPGDelegationRepository,
    AsyncPGResourcePermissionRepository,
    AsyncPGRolePermissionRepository,
    AsyncPGUserRoleRepository,
)
from ...audit.repositories import AsyncPGAuditLogRepository
from ...events.entities.protocols import EventPublisher
from ...permissions.repositories import AsyncPGPermissionRepository, AsyncPGRoleRepository
from ...users.repositories import AsyncPGUserRepository
from ..entities.session import StorageSession
from ..services.unit_of_work import BaseUnitOfWork

logger = logging.getLogger(__name__)


class AsyncPGUnitOfWork(BaseUnitOfWork):
    """Binds every repository to one pooled connection inside one transaction.

    Concurrent writers are arbitrated by PostgreSQL: the partial unique
    indexes reject a second active row, surfacing as ConstraintViolationError.
    """

    def __init__(
        self,
        database: DatabaseManager,
        schema: str = "public",
        publisher: Optional[EventPublisher] = None,
    ):
        super().__init__(publisher)
        self.database = database
        self.schema = schema

    def _session(self, connection: asyncpg.Connection) -> StorageSession:
        return StorageSession(
            users=AsyncPGUserRepository(connection, self.schema),
            roles=AsyncPGRoleRepository(connection, self.schema),
            permissions=AsyncPGPermissionRepository(connection, self.schema),
            user_roles=AsyncPGUserRoleRepository(connection, self.schema),
            role_permissions=AsyncPGRolePermissionRepository(connection, self.schema),
            resource_permissions=AsyncPGResourcePermissionRepository(connection, self.schema),
            delegations=AsyncPGDelegationRepository(connection, self.schema),
            audit_logs=AsyncPGAuditLogRepository(connection, self.schema),
        )

    @asynccontextmanager
    async def _open_session(self) -> AsyncIterator[StorageSession]:
        async with self.database.acquire() as connection:
            transaction = connection.transaction()
            try:
                await transaction.start()
            except asyncpg.PostgresError as e:
                logger.error(f"Failed to begin transaction: {e}")
                raise TransactionError(f"Failed to begin transaction: {e}") from e
            try:
                yield self._session(connection)
            except BaseException:
                await transaction.rollback()
                raise
            try:
                await transaction.commit()
            except asyncpg.PostgresError as e:
                logger.error(f"Failed to commit transaction: {e}")
                raise TransactionError(f"Failed to commit transaction: {e}") from e
