"""Permission domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from ....core.temporal import SoftDeleteMixin
from ....utils.time import utc_now


def split_permission_id(permission_id: str) -> Tuple[Optional[str], Optional[str]]:
    """Split ``resource:action``. Ids without a colon yield ``(None, None)``."""
    resource, sep, action = permission_id.partition(":")
    if not sep or not resource or not action:
        return None, None
    return resource, action


@dataclass
class Permission(SoftDeleteMixin):
    """Atomic permission, conventionally identified as ``resource:action``."""

    entity_type = "permission"

    id: str
    name: str
    description: Optional[str] = None
    resource_type: Optional[str] = None
    action: Optional[str] = None

    created_at: datetime = field(default_factory=utc_now)
    updated_at: Optional[datetime] = None
    deleted: bool = False
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return not self.deleted
