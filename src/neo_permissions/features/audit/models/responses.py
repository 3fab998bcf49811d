"""Audit response models."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AuditLogResponse(BaseModel):
    id: Optional[int] = None
    timestamp: datetime
    user_id: Optional[str] = None
    action: str
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    decision: str
    reason: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    additional_context: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, entry) -> "AuditLogResponse":
        return cls(
            id=entry.id,
            timestamp=entry.timestamp,
            user_id=entry.user_id,
            action=entry.action,
            resource_type=entry.resource_type,
            resource_id=entry.resource_id,
            decision=entry.decision.value,
            reason=entry.reason,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            additional_context=dict(entry.additional_context),
        )


class AuditLogListResponse(BaseModel):
    entries: List[AuditLogResponse] = Field(default_factory=list)
    limit: int
    offset: int
