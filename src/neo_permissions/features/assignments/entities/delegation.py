"""User-to-user delegation row."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ....core.temporal import TemporalGrantMixin


@dataclass
class Delegation(TemporalGrantMixin):
    """Time-bounded hand-over of part of the delegator's access.

    ``scope`` is stored as a plain string so rows written with an unknown
    scope still load; the scope evaluator denies them.
    """

    entity_type = "delegation"

    delegator_id: str
    delegatee_id: str
    scope: str
    valid_from: datetime
    resource_type: Optional[str] = None
    resource_ids: List[str] = field(default_factory=list)
    valid_until: Optional[datetime] = None
    reason: Optional[str] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None
    id: Optional[int] = None

    @property
    def granted_at(self) -> datetime:
        return self.valid_from

    def is_active(self, now: datetime) -> bool:
        return (
            self.revoked_at is None
            and self.valid_from <= now
            and (self.valid_until is None or self.valid_until > now)
        )

    def involves(self, user_id: str) -> bool:
        return user_id in (self.delegator_id, self.delegatee_id)
