"""AsyncPG-based permission repository implementation."""

from typing import List, Optional

import asyncpg

from ....database.base_repository import AsyncPGRepository
from ..entities import Permission

_COLUMNS = """
    id, name, description, resource_type, action, created_at, updated_at,
    deleted, deleted_at, deleted_by
"""


class AsyncPGPermissionRepository(AsyncPGRepository):
    """AsyncPG implementation of PermissionRepository protocol."""

    table = "permissions"

    def _build_permission_from_row(self, row: asyncpg.Record) -> Permission:
        return Permission(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            resource_type=row["resource_type"],
            action=row["action"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted=row["deleted"],
            deleted_at=row["deleted_at"],
            deleted_by=row["deleted_by"],
        )

    async def get_by_id(self, permission_id: str) -> Optional[Permission]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE id = $1 AND deleted = false"
        row = await self._fetchrow("get permission", query, permission_id)
        return self._build_permission_from_row(row) if row else None

    async def get_by_id_including_deleted(self, permission_id: str) -> Optional[Permission]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE id = $1"
        row = await self._fetchrow("get permission", query, permission_id)
        return self._build_permission_from_row(row) if row else None

    async def list_active(self) -> List[Permission]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE deleted = false ORDER BY id"
        rows = await self._fetch("list permissions", query)
        return [self._build_permission_from_row(row) for row in rows]

    async def list_by_resource_type(self, resource_type: str) -> List[Permission]:
        query = f"""
            SELECT {_COLUMNS} FROM {self.qualified_table}
            WHERE resource_type = $1 AND deleted = false
            ORDER BY id
        """
        rows = await self._fetch("list permissions by resource type", query, resource_type)
        return [self._build_permission_from_row(row) for row in rows]

    async def save(self, permission: Permission) -> Permission:
        query = f"""
            INSERT INTO {self.qualified_table} (
                id, name, description, resource_type, action, created_at, updated_at,
                deleted, deleted_at, deleted_by
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            ON CONFLICT (id) DO UPDATE SET
                name = EXCLUDED.name,
                description = EXCLUDED.description,
                resource_type = EXCLUDED.resource_type,
                action = EXCLUDED.action,
                updated_at = EXCLUDED.updated_at,
                deleted = EXCLUDED.deleted,
                deleted_at = EXCLUDED.deleted_at,
                deleted_by = EXCLUDED.deleted_by
        """
        await self._execute(
            "save permission",
            query,
            permission.id, permission.name, permission.description,
            permission.resource_type, permission.action,
            permission.created_at, permission.updated_at,
            permission.deleted, permission.deleted_at, permission.deleted_by,
        )
        return permission
