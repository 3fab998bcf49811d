"""AsyncPG-based role permission repository implementation."""

from datetime import datetime
from typing import List, Optional

import asyncpg

from ....database.base_repository import AsyncPGRepository
from ..entities import RolePermission

_COLUMNS = "id, role_id, permission_id, granted_at, granted_by, revoked_at, revoked_by"


class AsyncPGRolePermissionRepository(AsyncPGRepository):
    """AsyncPG implementation of RolePermissionRepository protocol."""

    table = "role_permissions"

    def _build_role_permission_from_row(self, row: asyncpg.Record) -> RolePermission:
        return RolePermission(
            id=row["id"],
            role_id=row["role_id"],
            permission_id=row["permission_id"],
            granted_at=row["granted_at"],
            granted_by=row["granted_by"],
            revoked_at=row["revoked_at"],
            revoked_by=row["revoked_by"],
        )

    async def _select(self, operation: str, where: str, *args) -> List[RolePermission]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE {where} ORDER BY id"
        rows = await self._fetch(operation, query, *args)
        return [self._build_role_permission_from_row(row) for row in rows]

    async def find_unrevoked_by_role(self, role_id: str) -> List[RolePermission]:
        return await self._select(
            "find role permissions", "role_id = $1 AND revoked_at IS NULL", role_id
        )

    async def find_unrevoked_by_permission(self, permission_id: str) -> List[RolePermission]:
        return await self._select(
            "find permission grants", "permission_id = $1 AND revoked_at IS NULL", permission_id
        )

    async def find_unrevoked(self, role_id: str, permission_id: str) -> Optional[RolePermission]:
        rows = await self._select(
            "find role permission",
            "role_id = $1 AND permission_id = $2 AND revoked_at IS NULL",
            role_id, permission_id,
        )
        return rows[0] if rows else None

    async def find_by_role_at_point_in_time(
        self, role_id: str, instant: datetime
    ) -> List[RolePermission]:
        return await self._select(
            "find role permissions at point in time",
            "role_id = $1 AND granted_at <= $2 AND (revoked_at IS NULL OR revoked_at > $2)",
            role_id, instant,
        )

    async def save(self, role_permission: RolePermission) -> RolePermission:
        if role_permission.id is None:
            query = f"""
                INSERT INTO {self.qualified_table} (
                    role_id, permission_id, granted_at, granted_by, revoked_at, revoked_by
                ) VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING id
            """
            role_permission.id = await self._fetchval(
                "insert role permission",
                query,
                role_permission.role_id, role_permission.permission_id,
                role_permission.granted_at, role_permission.granted_by,
                role_permission.revoked_at, role_permission.revoked_by,
            )
        else:
            query = f"UPDATE {self.qualified_table} SET revoked_at = $2, revoked_by = $3 WHERE id = $1"
            await self._execute(
                "update role permission",
                query,
                role_permission.id, role_permission.revoked_at, role_permission.revoked_by,
            )
        return role_permission
