"""AsyncPG-based delegation repository implementation."""

from datetime import datetime
from typing import List, Optional

import asyncpg

from ....database.base_repository import AsyncPGRepository
from ..entities import Delegation

_COLUMNS = """
    id, delegator_id, delegatee_id, scope, resource_type, resource_ids,
    valid_from, valid_until, revoked_at, revoked_by, reason
"""

_ACTIVE = "revoked_at IS NULL AND valid_from <= $2 AND (valid_until IS NULL OR valid_until > $2)"


class AsyncPGDelegationRepository(AsyncPGRepository):
    """AsyncPG implementation of DelegationRepository protocol."""

    table = "delegations"

    def _build_delegation_from_row(self, row: asyncpg.Record) -> Delegation:
        return Delegation(
            id=row["id"],
            delegator_id=row["delegator_id"],
            delegatee_id=row["delegatee_id"],
            scope=row["scope"],
            resource_type=row["resource_type"],
            resource_ids=list(row["resource_ids"] or []),
            valid_from=row["valid_from"],
            valid_until=row["valid_until"],
            revoked_at=row["revoked_at"],
            revoked_by=row["revoked_by"],
            reason=row["reason"],
        )

    async def _select(self, operation: str, where: str, *args) -> List[Delegation]:
        query = f"SELECT {_COLUMNS} FROM {self.qualified_table} WHERE {where} ORDER BY id"
        rows = await self._fetch(operation, query, *args)
        return [self._build_delegation_from_row(row) for row in rows]

    async def get_by_id(self, delegation_id: int) -> Optional[Delegation]:
        rows = await self._select("get delegation", "id = $1", delegation_id)
        return rows[0] if rows else None

    async def find_active_for_delegatee(self, user_id: str, now: datetime) -> List[Delegation]:
        return await self._select(
            "find received delegations", f"delegatee_id = $1 AND {_ACTIVE}", user_id, now
        )

    async def find_active_by_delegator(self, user_id: str, now: datetime) -> List[Delegation]:
        return await self._select(
            "find given delegations", f"delegator_id = $1 AND {_ACTIVE}", user_id, now
        )

    async def find_unrevoked_by_party(self, user_id: str) -> List[Delegation]:
        return await self._select(
            "find delegations by party",
            "(delegator_id = $1 OR delegatee_id = $1) AND revoked_at IS NULL",
            user_id,
        )

    async def save(self, delegation: Delegation) -> Delegation:
        if delegation.id is None:
            query = f"""
                INSERT INTO {self.qualified_table} (
                    delegator_id, delegatee_id, scope, resource_type, resource_ids,
                    valid_from, valid_until, revoked_at, revoked_by, reason
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                RETURNING id
            """
            delegation.id = await self._fetchval(
                "insert delegation",
                query,
                delegation.delegator_id, delegation.delegatee_id, delegation.scope,
                delegation.resource_type, delegation.resource_ids or None,
                delegation.valid_from, delegation.valid_until,
                delegation.revoked_at, delegation.revoked_by, delegation.reason,
            )
        else:
            query = f"UPDATE {self.qualified_table} SET revoked_at = $2, revoked_by = $3 WHERE id = $1"
            await self._execute(
                "update delegation", query, delegation.id, delegation.revoked_at, delegation.revoked_by
            )
        return delegation
