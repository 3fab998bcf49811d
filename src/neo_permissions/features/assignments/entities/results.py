"""Read models returned by the assignment services."""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Set

from ....config.constants import CascadeEntityType
from .delegation import Delegation
from .resource_permission import ResourcePermission


@dataclass(frozen=True)
class EffectivePermissions:
    """Everything a user can do at one instant.

    ``role_permissions`` holds permission ids reached through active roles.
    Resource grants and delegations are returned as rows for callers that need
    resource-level detail. Point-in-time results never carry delegations.
    """

    role_permissions: FrozenSet[str] = frozenset()
    resource_permissions: List[ResourcePermission] = field(default_factory=list)
    delegations: List[Delegation] = field(default_factory=list)

    def all_permission_ids(self) -> Set[str]:
        """Role-based ids plus the permission string of every resource grant."""
        ids = set(self.role_permissions)
        ids.update(grant.permission for grant in self.resource_permissions)
        return ids

    def has(self, permission_id: str) -> bool:
        return permission_id in self.all_permission_ids()


@dataclass(frozen=True)
class DelegationsSummary:
    """Active delegations a user has given and received."""

    given: List[Delegation] = field(default_factory=list)
    received: List[Delegation] = field(default_factory=list)


@dataclass(frozen=True)
class CascadeResult:
    """Outcome of one cascading revocation."""

    entity_type: CascadeEntityType
    entity_id: str
    revoked_by: str
    affected_user_ids: FrozenSet[str] = frozenset()
    affected_role_ids: FrozenSet[str] = frozenset()
    revoked_user_roles: int = 0
    revoked_role_permissions: int = 0
    revoked_resource_permissions: int = 0
    revoked_delegations: int = 0

    @property
    def revoked_rows(self) -> int:
        return (
            self.revoked_user_roles
            + self.revoked_role_permissions
            + self.revoked_resource_permissions
            + self.revoked_delegations
        )
