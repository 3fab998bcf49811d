"""AsyncPG-based role repository implementation."""

import logging
from typing import List, Optional

import asyncpg

from ....database.base_repository import AsyncPGRepository
from ..entities import Role

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, name, description, parent_role_id, is_system, created_at, updated_at,
    deleted, deleted_at, deleted_by
"""


class AsyncPGRoleRepository(AsyncPGRepository):
    """AsyncPG implementation of RoleRepository protocol."""

    table = "roles"

    def _build_role_from_row(self, row: asyncpg.Record) -> Role:
        return Role(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            parent_role_id=row["parent_role_id"],
            is_system=row["is_system"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted=row["deleted"],
            deleted_at=row["deleted_at"],
            deleted_by=row["deleted_by"],
        )

    async def get_by_id(self, role_id: str) -> Optional[Role]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE id = $1 AND deleted = false"
        row = await self._fetchrow("get role", query, role_id)
        return self._build_role_from_row(row) if row else None

    async def get_by_id_including_deleted(self, role_id: str) -> Optional[Role]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE id = $1"
        row = await self._fetchrow("get role", query, role_id)
        return self._build_role_from_row(row) if row else None

    async def get_by_name(self, name: str) -> Optional[Role]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE name = $1 AND deleted = false"
        row = await self._fetchrow("get role by name", query, name)
        return self._build_role_from_row(row) if row else None

    async def list_active(self) -> List[Role]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE deleted = false ORDER BY id"
        rows = await self._fetch("list roles", query)
        return [self._build_role_from_row(row) for row in rows]

    async def list_children(self, parent_role_id: str) -> List[Role]:
        query = f"""
            SELECT {_COLUMNS} FROM {self.qualified_table}
            WHERE parent_role_id = $1 AND deleted = false
            ORDER BY id
        """
        rows = await self._fetch("list child roles", query, parent_role_id)
        return [self._build_role_from_row(row) for row in rows]

    async def save(self, role: Role) -> Role:
        query = f"""
            INSERT INTO {self.qualified_table} (
                id, name, description, parent_role_id, is_system, created_at, updated_at,
                deleted, deleted_at, deleted_by
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            ON CONFLICT (id) DO UPDATE SET
                name = EXCLUDED.name,
                description = EXCLUDED.description,
                parent_role_id = EXCLUDED.parent_role_id,
                updated_at = EXCLUDED.updated_at,
                deleted = EXCLUDED.deleted,
                deleted_at = EXCLUDED.deleted_at,
                deleted_by = EXCLUDED.deleted_by
        """
        await self._execute(
            "save role",
            query,
            role.id, role.name, role.description, role.parent_role_id, role.is_system,
            role.created_at, role.updated_at, role.deleted, role.deleted_at, role.deleted_by,
        )
        logger.debug(f"Saved role {role.id}")
        return role
