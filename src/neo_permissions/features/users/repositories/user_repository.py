"""AsyncPG-based user repository implementation."""

import logging
from typing import List, Optional

import asyncpg

from ....database.base_repository import AsyncPGRepository
from ..entities import User

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, external_subject, email, display_name, created_at, updated_at,
    deleted, deleted_at, deleted_by
"""


class AsyncPGUserRepository(AsyncPGRepository):
    """AsyncPG implementation of UserRepository protocol."""

    table = "users"

    def _build_user_from_row(self, row: asyncpg.Record) -> User:
        return User(
            id=row["id"],
            external_subject=row["external_subject"],
            email=row["email"],
            display_name=row["display_name"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted=row["deleted"],
            deleted_at=row["deleted_at"],
            deleted_by=row["deleted_by"],
        )

    async def get_by_id(self, user_id: str) -> Optional[User]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE id = $1 AND deleted = false"
        row = await self._fetchrow("get user", query, user_id)
        return self._build_user_from_row(row) if row else None

    async def get_by_id_including_deleted(self, user_id: str) -> Optional[User]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE id = $1"
        row = await self._fetchrow("get user", query, user_id)
        return self._build_user_from_row(row) if row else None

    async def get_by_external_subject(self, subject: str) -> Optional[User]:
        query = f"""
            SELECT {_COLUMNS} FROM {self.qualified_table}
            WHERE external_subject = $1
            ORDER BY deleted ASC, deleted_at DESC NULLS LAST
            LIMIT 1
        """
        row = await self._fetchrow("get user by subject", query, subject)
        return self._build_user_from_row(row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE email = $1 AND deleted = false"
        row = await self._fetchrow("get user by email", query, email)
        return self._build_user_from_row(row) if row else None

    async def list_active(self) -> List[User]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE deleted = false ORDER BY created_at, id"
        rows = await self._fetch("list users", query)
        return [self._build_user_from_row(row) for row in rows]

    async def save(self, user: User) -> User:
        query = f"""
            INSERT INTO {self.qualified_table} (
                id, external_subject, email, display_name, created_at, updated_at,
                deleted, deleted_at, deleted_by
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            ON CONFLICT (id) DO UPDATE SET
                external_subject = EXCLUDED.external_subject,
                email = EXCLUDED.email,
                display_name = EXCLUDED.display_name,
                updated_at = EXCLUDED.updated_at,
                deleted = EXCLUDED.deleted,
                deleted_at = EXCLUDED.deleted_at,
                deleted_by = EXCLUDED.deleted_by
        """
        await self._execute(
            "save user",
            query,
            user.id, user.external_subject, user.email, user.display_name,
            user.created_at, user.updated_at, user.deleted, user.deleted_at, user.deleted_by,
        )
        logger.debug(f"Saved user {user.id}")
        return user
