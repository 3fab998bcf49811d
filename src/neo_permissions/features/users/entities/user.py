"""User domain entity.

A local authorization subject linked to an external identity provider
subject. Users are soft-deleted so their history stays attributable.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ....core.temporal import SoftDeleteMixin
from ....utils.time import utc_now


@dataclass
class User(SoftDeleteMixin):
    """User domain entity.

    The external subject and the email are unique among non-deleted users and
    may be reused once the holder is soft-deleted.
    """

    entity_type = "user"

    id: str
    external_subject: str
    email: str
    display_name: Optional[str] = None

    created_at: datetime = field(default_factory=utc_now)
    updated_at: Optional[datetime] = None
    deleted: bool = False
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return not self.deleted

    def update_profile(self, email: str, display_name: Optional[str], at: datetime) -> None:
        self.email = email
        self.display_name = display_name
        self.updated_at = at
