"""AsyncPG-based resource permission repository implementation."""

from datetime import datetime
from typing import List, Optional

import asyncpg

from ....database.base_repository import AsyncPGRepository
from ..entities import ResourcePermission

_COLUMNS = """
    id, user_id, resource_type, resource_id, permission, granted_at, granted_by,
    expires_at, revoked_at, revoked_by, reason
"""


class AsyncPGResourcePermissionRepository(AsyncPGRepository):
    """AsyncPG implementation of ResourcePermissionRepository protocol."""

    table = "resource_permissions"

    def _build_grant_from_row(self, row: asyncpg.Record) -> ResourcePermission:
        return ResourcePermission(
            id=row["id"],
            user_id=row["user_id"],
            resource_type=row["resource_type"],
            resource_id=row["resource_id"],
            permission=row["permission"],
            granted_at=row["granted_at"],
            granted_by=row["granted_by"],
            expires_at=row["expires_at"],
            revoked_at=row["revoked_at"],
            revoked_by=row["revoked_by"],
            reason=row["reason"],
        )

    async def _select(self, operation: str, where: str, *args) -> List[ResourcePermission]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE {where} ORDER BY id"
        rows = await self._fetch(operation, query, *args)
        return [self._build_grant_from_row(row) for row in rows]

    async def get_by_id(self, grant_id: int) -> Optional[ResourcePermission]:
        rows = await self._select("get resource permission", "id = $1", grant_id)
        return rows[0] if rows else None

    async def find_active_by_user(self, user_id: str, now: datetime) -> List[ResourcePermission]:
        return await self._select(
            "find active resource permissions",
            "user_id = $1 AND revoked_at IS NULL AND (expires_at IS NULL OR expires_at > $2)",
            user_id, now,
        )

    async def find_unrevoked_by_user(self, user_id: str) -> List[ResourcePermission]:
        return await self._select(
            "find unrevoked resource permissions", "user_id = $1 AND revoked_at IS NULL", user_id
        )

    async def find_active_for_resource(
        self, user_id: str, resource_type: str, resource_id: str, now: datetime
    ) -> List[ResourcePermission]:
        return await self._select(
            "find resource permissions for resource",
            "user_id = $1 AND resource_type = $2 AND resource_id = $3 "
            "AND revoked_at IS NULL AND (expires_at IS NULL OR expires_at > $4)",
            user_id, resource_type, resource_id, now,
        )

    async def find_unrevoked(
        self, user_id: str, resource_type: str, resource_id: str, permission: str
    ) -> Optional[ResourcePermission]:
        rows = await self._select(
            "find resource permission",
            "user_id = $1 AND resource_type = $2 AND resource_id = $3 AND permission = $4 "
            "AND revoked_at IS NULL",
            user_id, resource_type, resource_id, permission,
        )
        return rows[0] if rows else None

    async def find_at_point_in_time(
        self, user_id: str, instant: datetime
    ) -> List[ResourcePermission]:
        return await self._select(
            "find resource permissions at point in time",
            "user_id = $1 AND granted_at <= $2 AND (revoked_at IS NULL OR revoked_at > $2)",
            user_id, instant,
        )

    async def save(self, grant: ResourcePermission) -> ResourcePermission:
        if grant.id is None:
            query = f"""
                INSERT INTO {self.qualified_table} (
                    user_id, resource_type, resource_id, permission, granted_at, granted_by,
                    expires_at, revoked_at, revoked_by, reason
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                RETURNING id
            """
            grant.id = await self._fetchval(
                "insert resource permission",
                query,
                grant.user_id, grant.resource_type, grant.resource_id, grant.permission,
                grant.granted_at, grant.granted_by, grant.expires_at,
                grant.revoked_at, grant.revoked_by, grant.reason,
            )
        else:
            query = f"UPDATE {self.qualified_table} SET revoked_at = $2, revoked_by = $3 WHERE id = $1"
            await self._execute(
                "update resource permission", query, grant.id, grant.revoked_at, grant.revoked_by
            )
        return grant
