"""Role domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ....core.temporal import SoftDeleteMixin
from ....utils.time import utc_now


@dataclass
class Role(SoftDeleteMixin):
    """Role definition.

    ``parent_role_id`` is a weak single-level reference. It is stored and
    validated on write but permission resolution never walks it.
    """

    entity_type = "role"

    id: str
    name: str
    description: Optional[str] = None
    parent_role_id: Optional[str] = None
    is_system: bool = False

    created_at: datetime = field(default_factory=utc_now)
    updated_at: Optional[datetime] = None
    deleted: bool = False
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return not self.deleted
