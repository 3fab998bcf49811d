"""AsyncPG-based audit log repository implementation."""

import json
from datetime import datetime
from typing import List

import asyncpg

from ....config.constants import AuditDecision
from ....database.base_repository import AsyncPGRepository
from ..entities import AuthorizationAuditLog

_COLUMNS = """
    id, timestamp, user_id, action, resource_type, resource_id, decision,
    reason, ip_address, user_agent, additional_context
"""


class AsyncPGAuditLogRepository(AsyncPGRepository):
    """AsyncPG implementation of AuditLogRepository protocol. Insert and select only."""

    table = "authorization_audit_log"

    def _build_entry_from_row(self, row: asyncpg.Record) -> AuthorizationAuditLog:
        context = row["additional_context"]
        if isinstance(context, str):
            context = json.loads(context)
        return AuthorizationAuditLog(
            id=row["id"],
            timestamp=row["timestamp"],
            user_id=row["user_id"],
            action=row["action"],
            resource_type=row["resource_type"],
            resource_id=row["resource_id"],
            decision=AuditDecision(row["decision"]),
            reason=row["reason"],
            ip_address=row["ip_address"],
            user_agent=row["user_agent"],
            additional_context=context or {},
        )

    async def append(self, entry: AuthorizationAuditLog) -> AuthorizationAuditLog:
        query = f"""
            INSERT INTO {self.qualified_table} (
                timestamp, user_id, action, resource_type, resource_id, decision,
                reason, ip_address, user_agent, additional_context
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10::jsonb)
            RETURNING {_COLUMNS}
        """
        row = await self._fetchrow(
            "append audit entry",
            query,
            entry.timestamp, entry.user_id, entry.action, entry.resource_type,
            entry.resource_id, entry.decision.value, entry.reason, entry.ip_address,
            entry.user_agent, json.dumps(entry.additional_context) if entry.additional_context else None,
        )
        return self._build_entry_from_row(row)

    async def find_by_user(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> List[AuthorizationAuditLog]:
        query = f"""
            SELECT {_COLUMNS} FROM {self.qualified_table}
            WHERE user_id = $1
            ORDER BY timestamp DESC, id DESC
            LIMIT $2 OFFSET $3
        """
        rows = await self._fetch("query audit by user", query, user_id, limit, offset)
        return [self._build_entry_from_row(row) for row in rows]

    async def find_by_time_range(
        self, start: datetime, end: datetime, limit: int = 50, offset: int = 0
    ) -> List[AuthorizationAuditLog]:
        query = f"""
            SELECT {_COLUMNS} FROM {self.qualified_table}
            WHERE timestamp BETWEEN $1 AND $2
            ORDER BY timestamp DESC, id DESC
            LIMIT $3 OFFSET $4
        """
        rows = await self._fetch("query audit by time range", query, start, end, limit, offset)
        return [self._build_entry_from_row(row) for row in rows]

    async def find_all(self, limit: int = 50, offset: int = 0) -> List[AuthorizationAuditLog]:
        query = f"""
            SELECT {_COLUMNS} FROM {self.qualified_table}
            ORDER BY timestamp DESC, id DESC
            LIMIT $1 OFFSET $2
        """
        rows = await self._fetch("query audit log", query, limit, offset)
        return [self._build_entry_from_row(row) for row in rows]
