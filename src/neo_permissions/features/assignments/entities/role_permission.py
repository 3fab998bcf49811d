"""Role to permission grant row."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ....core.temporal import TemporalGrantMixin


@dataclass
class RolePermission(TemporalGrantMixin):
    """Temporal role-permission grant. No expiry, revocation only."""

    entity_type = "role_permission"

    role_id: str
    permission_id: str
    granted_at: datetime
    granted_by: Optional[str] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None
    id: Optional[int] = None

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.revoked_at is None
