"""User to role assignment row."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ....core.temporal import TemporalGrantMixin


@dataclass
class UserRole(TemporalGrantMixin):
    """Temporal user-role assignment.

    At most one unrevoked row exists per (user_id, role_id, organization_id).
    Re-granting after a revocation inserts a new row.
    """

    entity_type = "user_role"

    user_id: str
    role_id: str
    granted_at: datetime
    granted_by: Optional[str] = None
    organization_id: Optional[str] = None
    expires_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None
    id: Optional[int] = None

    def is_active(self, now: datetime) -> bool:
        return self.revoked_at is None and (self.expires_at is None or self.expires_at > now)
