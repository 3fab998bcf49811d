"""Permission change event.

Emitted by every mutation of authorization state. Events are staged inside
the unit of work and handed to the dispatcher only after commit, so cache
cache invalidation and audit never observe rolled-back changes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional

from ....config.constants import CascadeEntityType, PermissionChangeAction
from ....utils.time import utc_now


def _freeze(context: Mapping[str, object]) -> Mapping[str, str]:
    return MappingProxyType({key: str(value) for key, value in context.items() if value is not None})


@dataclass(frozen=True)
class PermissionChangeEvent:
    """Typed change notification.

    ``user_id`` is the subject user, or None for events scoped to a role or a
    permission. ``affected_user_ids`` lists other users whose effective
    permissions changed as a side effect.
    """

    action: PermissionChangeAction
    user_id: Optional[str] = None
    context: Mapping[str, str] = field(default_factory=dict)
    affected_user_ids: FrozenSet[str] = frozenset()
    occurred_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        object.__setattr__(self, "context", _freeze(self.context))
        object.__setattr__(self, "affected_user_ids", frozenset(self.affected_user_ids))

    def invalidation_targets(self) -> FrozenSet[str]:
        """User ids whose cached permissions must be dropped."""
        targets = set(self.affected_user_ids)
        if self.user_id is not None:
            targets.add(self.user_id)
        return frozenset(targets)

    def describe(self) -> str:
        """Render the context as ``key=value`` pairs for audit reasons."""
        return ", ".join(f"{key}={value}" for key, value in sorted(self.context.items()))

    # Factories

    @classmethod
    def role_assigned(cls, user_id: str, role_id: str, granted_by: str) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.ROLE_ASSIGNED,
            user_id=user_id,
            context={"role_id": role_id, "granted_by": granted_by},
        )

    @classmethod
    def role_revoked(cls, user_id: str, role_id: str, revoked_by: str) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.ROLE_REVOKED,
            user_id=user_id,
            context={"role_id": role_id, "revoked_by": revoked_by},
        )

    @classmethod
    def cascading_revocation(
        cls,
        entity_type: CascadeEntityType,
        entity_id: str,
        revoked_by: str,
        affected_user_ids: Iterable[str] = (),
    ) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.CASCADING_REVOCATION,
            user_id=entity_id if entity_type == CascadeEntityType.USER else None,
            context={
                "entity_type": entity_type.value,
                "entity_id": entity_id,
                "revoked_by": revoked_by,
            },
            affected_user_ids=frozenset(affected_user_ids),
        )

    @classmethod
    def delegation_created(
        cls, delegatee_id: str, delegation_id: int, delegator_id: str, scope: str
    ) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.DELEGATION_CREATED,
            user_id=delegatee_id,
            context={
                "delegation_id": delegation_id,
                "delegator_id": delegator_id,
                "scope": scope,
            },
        )

    @classmethod
    def delegation_revoked(
        cls, delegatee_id: str, delegation_id: int, delegator_id: str, revoked_by: str
    ) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.DELEGATION_REVOKED,
            user_id=delegatee_id,
            context={
                "delegation_id": delegation_id,
                "delegator_id": delegator_id,
                "revoked_by": revoked_by,
            },
        )

    @classmethod
    def user_deleted(cls, user_id: str, deleted_by: str) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.USER_DELETED,
            user_id=user_id,
            context={"deleted_by": deleted_by},
        )

    @classmethod
    def user_restored(cls, user_id: str) -> "PermissionChangeEvent":
        return cls(action=PermissionChangeAction.USER_RESTORED, user_id=user_id)

    @classmethod
    def resource_permission_granted(
        cls,
        user_id: str,
        grant_id: int,
        resource_type: str,
        resource_id: str,
        permission: str,
    ) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.RESOURCE_PERMISSION_GRANTED,
            user_id=user_id,
            context={
                "permission_id": grant_id,
                "resource_type": resource_type,
                "resource_id": resource_id,
                "permission": permission,
            },
        )

    @classmethod
    def resource_permission_revoked(
        cls, user_id: str, grant_id: int, revoked_by: str
    ) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.RESOURCE_PERMISSION_REVOKED,
            user_id=user_id,
            context={"permission_id": grant_id, "revoked_by": revoked_by},
        )

    @classmethod
    def role_permission_granted(
        cls, role_id: str, permission_id: str, granted_by: str, holders: Iterable[str]
    ) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.ROLE_PERMISSION_GRANTED,
            context={"role_id": role_id, "permission_id": permission_id, "granted_by": granted_by},
            affected_user_ids=frozenset(holders),
        )

    @classmethod
    def role_permission_revoked(
        cls, role_id: str, permission_id: str, revoked_by: str, holders: Iterable[str]
    ) -> "PermissionChangeEvent":
        return cls(
            action=PermissionChangeAction.ROLE_PERMISSION_REVOKED,
            context={"role_id": role_id, "permission_id": permission_id, "revoked_by": revoked_by},
            affected_user_ids=frozenset(holders),
        )
