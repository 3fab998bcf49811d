"""Lifecycle mixins shared by catalog entities and temporal assignment rows.

Catalog entities (users, roles, permissions) are soft-deleted, never removed.
Temporal rows are inserted once per grant and mutated exactly once, to record
their revocation.
"""

from datetime import datetime
from typing import Optional

from .exceptions import InvalidStateError


class SoftDeleteMixin:
    """Soft delete and restore for entities with ``deleted`` fields."""

    entity_type = "entity"

    def mark_deleted(self, deleted_by: Optional[str], at: datetime) -> None:
        if self.deleted:
            raise InvalidStateError(
                f"{self.entity_type.capitalize()} is already deleted",
                entity_type=self.entity_type,
                entity_id=self.id,
            )
        self.deleted = True
        self.deleted_at = at
        self.deleted_by = deleted_by
        self.updated_at = at

    def restore(self, at: datetime) -> None:
        if not self.deleted:
            raise InvalidStateError(
                f"{self.entity_type.capitalize()} is not deleted",
                entity_type=self.entity_type,
                entity_id=self.id,
            )
        self.deleted = False
        self.deleted_at = None
        self.deleted_by = None
        self.updated_at = at


class TemporalGrantMixin:
    """Grant/revoke window shared by every temporal assignment row."""

    entity_type = "assignment"

    def was_active_at(self, instant: datetime) -> bool:
        """Window predicate: granted_at <= instant < revoked_at (open ended when unrevoked)."""
        return self.granted_at <= instant and (
            self.revoked_at is None or self.revoked_at > instant
        )

    def revoke(self, revoked_by: Optional[str], at: datetime) -> None:
        if self.revoked_at is not None:
            raise InvalidStateError(
                f"{self.entity_type.replace('_', ' ').capitalize()} is already revoked",
                entity_type=self.entity_type,
                entity_id=self.id,
            )
        self.revoked_at = at
        self.revoked_by = revoked_by
