"""AsyncPG-based user role repository implementation."""

import logging
from datetime import datetime
from typing import List, Optional

import asyncpg

from ....database.base_repository import AsyncPGRepository
from ..entities import UserRole

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, user_id, role_id, organization_id, granted_at, granted_by,
    expires_at, revoked_at, revoked_by
"""


class AsyncPGUserRoleRepository(AsyncPGRepository):
    """AsyncPG implementation of UserRoleRepository protocol."""

    table = "user_roles"

    def _build_user_role_from_row(self, row: asyncpg.Record) -> UserRole:
        return UserRole(
            id=row["id"],
            user_id=row["user_id"],
            role_id=row["role_id"],
            organization_id=row["organization_id"],
            granted_at=row["granted_at"],
            granted_by=row["granted_by"],
            expires_at=row["expires_at"],
            revoked_at=row["revoked_at"],
            revoked_by=row["revoked_by"],
        )

    async def _select(self, operation: str, where: str, *args) -> List[UserRole]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE {where} ORDER BY id"
        rows = await self._fetch(operation, query, *args)
        return [self._build_user_role_from_row(row) for row in rows]

    async def find_active_by_user(self, user_id: str, now: datetime) -> List[UserRole]:
        return await self._select(
            "find active user roles",
            "user_id = $1 AND revoked_at IS NULL AND (expires_at IS NULL OR expires_at > $2)",
            user_id, now,
        )

    async def find_unrevoked_by_user(self, user_id: str) -> List[UserRole]:
        return await self._select(
            "find unrevoked user roles", "user_id = $1 AND revoked_at IS NULL", user_id
        )

    async def find_unrevoked_by_role(self, role_id: str) -> List[UserRole]:
        return await self._select(
            "find unrevoked role holders", "role_id = $1 AND revoked_at IS NULL", role_id
        )

    async def find_unrevoked(
        self, user_id: str, role_id: str, organization_id: Optional[str] = None
    ) -> Optional[UserRole]:
        rows = await self._select(
            "find unrevoked user role",
            "user_id = $1 AND role_id = $2 AND organization_id IS NOT DISTINCT FROM $3 "
            "AND revoked_at IS NULL",
            user_id, role_id, organization_id,
        )
        return rows[0] if rows else None

    async def find_at_point_in_time(self, user_id: str, instant: datetime) -> List[UserRole]:
        return await self._select(
            "find user roles at point in time",
            "user_id = $1 AND granted_at <= $2 AND (revoked_at IS NULL OR revoked_at > $2)",
            user_id, instant,
        )

    async def save(self, user_role: UserRole) -> UserRole:
        if user_role.id is None:
            query = f"""
                INSERT INTO {self.qualified_table} (
                    user_id, role_id, organization_id, granted_at, granted_by,
                    expires_at, revoked_at, revoked_by
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                RETURNING id
            """
            user_role.id = await self._fetchval(
                "insert user role",
                query,
                user_role.user_id, user_role.role_id, user_role.organization_id,
                user_role.granted_at, user_role.granted_by, user_role.expires_at,
                user_role.revoked_at, user_role.revoked_by,
            )
            logger.debug(f"Inserted user role {user_role.id} ({user_role.user_id} -> {user_role.role_id})")
        else:
            query = f"""
                UPDATE {self.qualified_table}
                SET revoked_at = $2, revoked_by = $3, expires_at = $4
                WHERE id = $1
            """
            await self._execute(
                "update user role",
                query,
                user_role.id, user_role.revoked_at, user_role.revoked_by, user_role.expires_at,
            )
        return user_role
