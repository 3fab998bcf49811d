"""Shared plumbing for AsyncPG repositories bound to one connection."""

import logging
from typing import Any, List, Optional

import asyncpg

from ..core.exceptions import ConstraintViolationError, DatabaseError

logger = logging.getLogger(__name__)


class AsyncPGRepository:
    """Runs queries on a transaction-bound connection and maps driver errors.

    A unique-index violation becomes ConstraintViolationError so services can
    translate it into a domain error. Every other driver failure becomes
    DatabaseError.
    """

    table: str = ""

    def __init__(self, connection: asyncpg.Connection, schema: str = "public"):
        self.connection = connection
        self.schema = schema

    @property
    def qualified_table(self) -> str:
        return f"{self.schema}.{self.table}"

    def _raise(self, operation: str, error: Exception) -> None:
        if isinstance(error, asyncpg.UniqueViolationError):
            constraint = getattr(error, "constraint_name", None)
            logger.warning(f"Unique constraint {constraint} violated during {operation} on {self.table}")
            raise ConstraintViolationError(
                f"Constraint violation on {self.table}: {error}", constraint=constraint
            ) from error
        logger.error(f"Failed to {operation} on {self.table}: {error}")
        raise DatabaseError(f"Failed to {operation} on {self.table}: {error}") from error

    async def _fetch(self, operation: str, query: str, *args) -> List[asyncpg.Record]:
        try:
            return await self.connection.fetch(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            self._raise(operation, e)

    async def _fetchrow(self, operation: str, query: str, *args) -> Optional[asyncpg.Record]:
        try:
            return await self.connection.fetchrow(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            self._raise(operation, e)

    async def _fetchval(self, operation: str, query: str, *args) -> Any:
        try:
            return await self.connection.fetchval(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            self._raise(operation, e)

    async def _execute(self, operation: str, query: str, *args) -> str:
        try:
            return await self.connection.execute(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            self._raise(operation, e)
