"""Instance-level permission row."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ....core.temporal import TemporalGrantMixin


@dataclass
class ResourcePermission(TemporalGrantMixin):
    """Grants ``permission`` on one resource instance to one user."""

    entity_type = "resource_permission"

    user_id: str
    resource_type: str
    resource_id: str
    permission: str
    granted_at: datetime
    granted_by: Optional[str] = None
    expires_at: Optional[datetime] = None
    reason: Optional[str] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None
    id: Optional[int] = None

    def is_active(self, now: datetime) -> bool:
        return self.revoked_at is None and (self.expires_at is None or self.expires_at > now)
