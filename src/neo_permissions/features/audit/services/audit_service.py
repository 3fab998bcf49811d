"""Authorization audit service."""

import logging
from typing import Any, Dict, List, Optional

from ....config.constants import AuditDecision
from ....utils.time import Clock, ensure_utc, utc_now
from ...events.entities import PermissionChangeEvent
from ...storage.entities import UnitOfWork
from ..entities import AuditQueryFilter, AuthorizationAuditLog

logger = logging.getLogger(__name__)


class AuditService:
    """Appends audit entries and answers audit queries.

    Recording is best effort: a failed write is logged and the caller carries
    on, so an audit outage never blocks an authorization decision.
    """

    def __init__(self, unit_of_work: UnitOfWork, clock: Clock = utc_now):
        self.unit_of_work = unit_of_work
        self._clock = clock

    async def record(
        self,
        action: str,
        decision: AuditDecision,
        user_id: Optional[str] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        reason: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuthorizationAuditLog]:
        entry = AuthorizationAuditLog(
            action=action,
            decision=decision,
            user_id=user_id,
            resource_type=resource_type,
            resource_id=resource_id,
            reason=reason,
            ip_address=ip_address,
            user_agent=user_agent,
            additional_context=dict(additional_context or {}),
            timestamp=self._clock(),
        )
        try:
            async with self.unit_of_work.transaction() as session:
                return await session.audit_logs.append(entry)
        except Exception as e:
            logger.error(f"Failed to record audit entry for {action}: {e}")
            return None

    async def record_permission_change(self, event: PermissionChangeEvent) -> None:
        """Dispatcher subscriber writing one GRANTED entry per change event."""
        context: Dict[str, Any] = dict(event.context)
        if event.affected_user_ids:
            context["affected_user_ids"] = sorted(event.affected_user_ids)
        await self.record(
            action=event.action.value,
            decision=AuditDecision.GRANTED,
            user_id=event.user_id,
            reason=event.describe() or None,
            additional_context=context,
        )

    async def query(
        self, filter: AuditQueryFilter, limit: int = 50, offset: int = 0
    ) -> List[AuthorizationAuditLog]:
        """Newest first. A user id wins over a time range; no criteria lists everything."""
        async with self.unit_of_work.transaction() as session:
            if filter.user_id:
                return await session.audit_logs.find_by_user(filter.user_id, limit, offset)
            if filter.has_time_range:
                return await session.audit_logs.find_by_time_range(
                    ensure_utc(filter.start_time), ensure_utc(filter.end_time), limit, offset
                )
            return await session.audit_logs.find_all(limit, offset)

    async def query_by_user(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> List[AuthorizationAuditLog]:
        return await self.query(AuditQueryFilter(user_id=user_id), limit, offset)
