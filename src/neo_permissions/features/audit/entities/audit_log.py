"""Authorization audit log entry."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ....config.constants import AuditDecision
from ....utils.time import utc_now


@dataclass(frozen=True)
class AuthorizationAuditLog:
    """Immutable audit record. Entries are appended, never updated or deleted."""

    action: str
    decision: AuditDecision
    user_id: Optional[str] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    reason: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    additional_context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utc_now)
    id: Optional[int] = None


@dataclass(frozen=True)
class AuditQueryFilter:
    """Query filter. A user id takes precedence over a time range."""

    user_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def has_time_range(self) -> bool:
        return self.start_time is not None and self.end_time is not None
