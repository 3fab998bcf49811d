"""Storage session bound to one transaction."""

from dataclasses import dataclass, field
from typing import List

from ...assignments.entities.protocols import (
    DelegationRepository,
    ResourcePermissionRepository,
    RolePermissionRepository,
    UserRoleRepository,
)
from ...audit.entities.protocols import AuditLogRepository
from ...events.entities.permission_change_event import PermissionChangeEvent
from ...permissions.entities.protocols import PermissionRepository, RoleRepository
from ...users.entities.protocols import UserRepository


@dataclass
class StorageSession:
    """One repository per entity, all bound to the same transaction.

    ``emit`` stages an event in the transaction outbox. Staged events are
    released only if the transaction commits.
    """

    users: UserRepository
    roles: RoleRepository
    permissions: PermissionRepository
    user_roles: UserRoleRepository
    role_permissions: RolePermissionRepository
    resource_permissions: ResourcePermissionRepository
    delegations: DelegationRepository
    audit_logs: AuditLogRepository
    pending_events: List[PermissionChangeEvent] = field(default_factory=list)

    def emit(self, event: PermissionChangeEvent) -> None:
        self.pending_events.append(event)
