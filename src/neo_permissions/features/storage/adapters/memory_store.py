"""In-process authorization store.

Reference storage backend used by tests and single-process deployments. It
enforces the same "one active row" uniqueness rules as the partial unique
indexes of the SQL schema, and supports whole-store snapshots so a failed
unit of work leaves no partial state behind.
"""

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from ....core.exceptions import ConstraintViolationError
from ...assignments.entities import Delegation, ResourcePermission, RolePermission, UserRole
from ...audit.entities import AuthorizationAuditLog
from ...permissions.entities import Permission, Role
from ...users.entities import User

T = TypeVar("T")


@dataclass
class InMemoryStore:
    """Tables keyed by primary key, plus sequence counters for numeric ids."""

    users: Dict[str, User] = field(default_factory=dict)
    roles: Dict[str, Role] = field(default_factory=dict)
    permissions: Dict[str, Permission] = field(default_factory=dict)
    user_roles: Dict[int, UserRole] = field(default_factory=dict)
    role_permissions: Dict[int, RolePermission] = field(default_factory=dict)
    resource_permissions: Dict[int, ResourcePermission] = field(default_factory=dict)
    delegations: Dict[int, Delegation] = field(default_factory=dict)
    audit_logs: Dict[int, AuthorizationAuditLog] = field(default_factory=dict)
    sequences: Dict[str, int] = field(default_factory=dict)

    TABLES = (
        "users",
        "roles",
        "permissions",
        "user_roles",
        "role_permissions",
        "resource_permissions",
        "delegations",
        "audit_logs",
        "sequences",
    )

    def next_id(self, table: str) -> int:
        value = self.sequences.get(table, 0) + 1
        self.sequences[table] = value
        return value

    def snapshot(self) -> Dict[str, dict]:
        return {name: copy.deepcopy(getattr(self, name)) for name in self.TABLES}

    def restore(self, snapshot: Dict[str, dict]) -> None:
        for name, table in snapshot.items():
            setattr(self, name, table)

    def row_count(self, table: str) -> int:
        return len(getattr(self, table))


def _copy(row: Optional[T]) -> Optional[T]:
    return copy.deepcopy(row) if row is not None else None


def _select(rows: Iterable[T], predicate: Callable[[T], bool]) -> List[T]:
    return [copy.deepcopy(row) for row in rows if predicate(row)]


class _MemoryRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store


class MemoryUserRepository(_MemoryRepository):
    """In-memory UserRepository."""

    async def get_by_id(self, user_id: str) -> Optional[User]:
        user = self.store.users.get(user_id)
        return _copy(user) if user is not None and not user.deleted else None

    async def get_by_id_including_deleted(self, user_id: str) -> Optional[User]:
        return _copy(self.store.users.get(user_id))

    async def get_by_external_subject(self, subject: str) -> Optional[User]:
        matches = [u for u in self.store.users.values() if u.external_subject == subject]
        if not matches:
            return None
        matches.sort(key=lambda u: (not u.deleted, u.deleted_at or u.created_at))
        return _copy(matches[-1])

    async def get_by_email(self, email: str) -> Optional[User]:
        for user in self.store.users.values():
            if user.email == email and not user.deleted:
                return _copy(user)
        return None

    async def list_active(self) -> List[User]:
        return _select(self.store.users.values(), lambda u: not u.deleted)

    async def save(self, user: User) -> User:
        if not user.deleted:
            for other in self.store.users.values():
                if other.id == user.id or other.deleted:
                    continue
                if other.external_subject == user.external_subject:
                    raise ConstraintViolationError(
                        f"Active user with subject {user.external_subject} already exists",
                        constraint="users_external_subject_active",
                    )
                if other.email == user.email:
                    raise ConstraintViolationError(
                        f"Active user with email {user.email} already exists",
                        constraint="users_email_active",
                    )
        self.store.users[user.id] = copy.deepcopy(user)
        return user


class MemoryRoleRepository(_MemoryRepository):
    """In-memory RoleRepository."""

    async def get_by_id(self, role_id: str) -> Optional[Role]:
        role = self.store.roles.get(role_id)
        return _copy(role) if role is not None and not role.deleted else None

    async def get_by_id_including_deleted(self, role_id: str) -> Optional[Role]:
        return _copy(self.store.roles.get(role_id))

    async def get_by_name(self, name: str) -> Optional[Role]:
        for role in self.store.roles.values():
            if role.name == name and not role.deleted:
                return _copy(role)
        return None

    async def list_active(self) -> List[Role]:
        return _select(self.store.roles.values(), lambda r: not r.deleted)

    async def list_children(self, parent_role_id: str) -> List[Role]:
        return _select(
            self.store.roles.values(),
            lambda r: r.parent_role_id == parent_role_id and not r.deleted,
        )

    async def save(self, role: Role) -> Role:
        if not role.deleted:
            for other in self.store.roles.values():
                if other.id != role.id and not other.deleted and other.name == role.name:
                    raise ConstraintViolationError(
                        f"Active role named {role.name} already exists",
                        constraint="roles_name_active",
                    )
        self.store.roles[role.id] = copy.deepcopy(role)
        return role


class MemoryPermissionRepository(_MemoryRepository):
    """In-memory PermissionRepository."""

    async def get_by_id(self, permission_id: str) -> Optional[Permission]:
        permission = self.store.permissions.get(permission_id)
        return _copy(permission) if permission is not None and not permission.deleted else None

    async def get_by_id_including_deleted(self, permission_id: str) -> Optional[Permission]:
        return _copy(self.store.permissions.get(permission_id))

    async def list_active(self) -> List[Permission]:
        return _select(self.store.permissions.values(), lambda p: not p.deleted)

    async def list_by_resource_type(self, resource_type: str) -> List[Permission]:
        return _select(
            self.store.permissions.values(),
            lambda p: p.resource_type == resource_type and not p.deleted,
        )

    async def save(self, permission: Permission) -> Permission:
        self.store.permissions[permission.id] = copy.deepcopy(permission)
        return permission


class MemoryUserRoleRepository(_MemoryRepository):
    """In-memory UserRoleRepository."""

    async def find_active_by_user(self, user_id: str, now: datetime) -> List[UserRole]:
        return _select(
            self.store.user_roles.values(),
            lambda ur: ur.user_id == user_id and ur.is_active(now),
        )

    async def find_unrevoked_by_user(self, user_id: str) -> List[UserRole]:
        return _select(
            self.store.user_roles.values(),
            lambda ur: ur.user_id == user_id and ur.revoked_at is None,
        )

    async def find_unrevoked_by_role(self, role_id: str) -> List[UserRole]:
        return _select(
            self.store.user_roles.values(),
            lambda ur: ur.role_id == role_id and ur.revoked_at is None,
        )

    async def find_unrevoked(
        self, user_id: str, role_id: str, organization_id: Optional[str] = None
    ) -> Optional[UserRole]:
        rows = _select(
            self.store.user_roles.values(),
            lambda ur: (
                ur.user_id == user_id
                and ur.role_id == role_id
                and ur.organization_id == organization_id
                and ur.revoked_at is None
            ),
        )
        return rows[0] if rows else None

    async def find_at_point_in_time(self, user_id: str, instant: datetime) -> List[UserRole]:
        return _select(
            self.store.user_roles.values(),
            lambda ur: ur.user_id == user_id and ur.was_active_at(instant),
        )

    async def save(self, user_role: UserRole) -> UserRole:
        if user_role.revoked_at is None:
            for other in self.store.user_roles.values():
                if (
                    other.id != user_role.id
                    and other.revoked_at is None
                    and other.user_id == user_role.user_id
                    and other.role_id == user_role.role_id
                    and other.organization_id == user_role.organization_id
                ):
                    raise ConstraintViolationError(
                        f"Active assignment of role {user_role.role_id} to user {user_role.user_id} already exists",
                        constraint="user_roles_active",
                    )
        if user_role.id is None:
            user_role.id = self.store.next_id("user_roles")
        self.store.user_roles[user_role.id] = copy.deepcopy(user_role)
        return user_role


class MemoryRolePermissionRepository(_MemoryRepository):
    """In-memory RolePermissionRepository."""

    async def find_unrevoked_by_role(self, role_id: str) -> List[RolePermission]:
        return _select(
            self.store.role_permissions.values(),
            lambda rp: rp.role_id == role_id and rp.revoked_at is None,
        )

    async def find_unrevoked_by_permission(self, permission_id: str) -> List[RolePermission]:
        return _select(
            self.store.role_permissions.values(),
            lambda rp: rp.permission_id == permission_id and rp.revoked_at is None,
        )

    async def find_unrevoked(self, role_id: str, permission_id: str) -> Optional[RolePermission]:
        rows = _select(
            self.store.role_permissions.values(),
            lambda rp: (
                rp.role_id == role_id
                and rp.permission_id == permission_id
                and rp.revoked_at is None
            ),
        )
        return rows[0] if rows else None

    async def find_by_role_at_point_in_time(
        self, role_id: str, instant: datetime
    ) -> List[RolePermission]:
        return _select(
            self.store.role_permissions.values(),
            lambda rp: rp.role_id == role_id and rp.was_active_at(instant),
        )

    async def save(self, role_permission: RolePermission) -> RolePermission:
        if role_permission.revoked_at is None:
            for other in self.store.role_permissions.values():
                if (
                    other.id != role_permission.id
                    and other.revoked_at is None
                    and other.role_id == role_permission.role_id
                    and other.permission_id == role_permission.permission_id
                ):
                    raise ConstraintViolationError(
                        f"Active grant of {role_permission.permission_id} to role {role_permission.role_id} already exists",
                        constraint="role_permissions_active",
                    )
        if role_permission.id is None:
            role_permission.id = self.store.next_id("role_permissions")
        self.store.role_permissions[role_permission.id] = copy.deepcopy(role_permission)
        return role_permission


class MemoryResourcePermissionRepository(_MemoryRepository):
    """In-memory ResourcePermissionRepository."""

    async def get_by_id(self, grant_id: int) -> Optional[ResourcePermission]:
        return _copy(self.store.resource_permissions.get(grant_id))

    async def find_active_by_user(self, user_id: str, now: datetime) -> List[ResourcePermission]:
        return _select(
            self.store.resource_permissions.values(),
            lambda rp: rp.user_id == user_id and rp.is_active(now),
        )

    async def find_unrevoked_by_user(self, user_id: str) -> List[ResourcePermission]:
        return _select(
            self.store.resource_permissions.values(),
            lambda rp: rp.user_id == user_id and rp.revoked_at is None,
        )

    async def find_active_for_resource(
        self, user_id: str, resource_type: str, resource_id: str, now: datetime
    ) -> List[ResourcePermission]:
        return _select(
            self.store.resource_permissions.values(),
            lambda rp: (
                rp.user_id == user_id
                and rp.resource_type == resource_type
                and rp.resource_id == resource_id
                and rp.is_active(now)
            ),
        )

    async def find_unrevoked(
        self, user_id: str, resource_type: str, resource_id: str, permission: str
    ) -> Optional[ResourcePermission]:
        rows = _select(
            self.store.resource_permissions.values(),
            lambda rp: (
                rp.user_id == user_id
                and rp.resource_type == resource_type
                and rp.resource_id == resource_id
                and rp.permission == permission
                and rp.revoked_at is None
            ),
        )
        return rows[0] if rows else None

    async def find_at_point_in_time(
        self, user_id: str, instant: datetime
    ) -> List[ResourcePermission]:
        return _select(
            self.store.resource_permissions.values(),
            lambda rp: rp.user_id == user_id and rp.was_active_at(instant),
        )

    async def save(self, grant: ResourcePermission) -> ResourcePermission:
        if grant.revoked_at is None:
            for other in self.store.resource_permissions.values():
                if (
                    other.id != grant.id
                    and other.revoked_at is None
                    and other.user_id == grant.user_id
                    and other.resource_type == grant.resource_type
                    and other.resource_id == grant.resource_id
                    and other.permission == grant.permission
                ):
                    raise ConstraintViolationError(
                        f"Active {grant.permission} grant on {grant.resource_type}/{grant.resource_id} "
                        f"for user {grant.user_id} already exists",
                        constraint="resource_permissions_active",
                    )
        if grant.id is None:
            grant.id = self.store.next_id("resource_permissions")
        self.store.resource_permissions[grant.id] = copy.deepcopy(grant)
        return grant


class MemoryDelegationRepository(_MemoryRepository):
    """In-memory DelegationRepository."""

    async def get_by_id(self, delegation_id: int) -> Optional[Delegation]:
        return _copy(self.store.delegations.get(delegation_id))

    async def find_active_for_delegatee(self, user_id: str, now: datetime) -> List[Delegation]:
        return _select(
            self.store.delegations.values(),
            lambda d: d.delegatee_id == user_id and d.is_active(now),
        )

    async def find_active_by_delegator(self, user_id: str, now: datetime) -> List[Delegation]:
        return _select(
            self.store.delegations.values(),
            lambda d: d.delegator_id == user_id and d.is_active(now),
        )

    async def find_unrevoked_by_party(self, user_id: str) -> List[Delegation]:
        return _select(
            self.store.delegations.values(),
            lambda d: d.involves(user_id) and d.revoked_at is None,
        )

    async def save(self, delegation: Delegation) -> Delegation:
        if delegation.id is None:
            delegation.id = self.store.next_id("delegations")
        self.store.delegations[delegation.id] = copy.deepcopy(delegation)
        return delegation


class MemoryAuditLogRepository(_MemoryRepository):
    """In-memory AuditLogRepository."""

    def _newest_first(self, entries: Iterable[AuthorizationAuditLog]) -> List[AuthorizationAuditLog]:
        return sorted(entries, key=lambda e: (e.timestamp, e.id or 0), reverse=True)

    async def append(self, entry: AuthorizationAuditLog) -> AuthorizationAuditLog:
        stored = replace(entry, id=self.store.next_id("audit_logs"))
        self.store.audit_logs[stored.id] = stored
        return stored

    async def find_by_user(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> List[AuthorizationAuditLog]:
        rows = self._newest_first(e for e in self.store.audit_logs.values() if e.user_id == user_id)
        return rows[offset:offset + limit]

    async def find_by_time_range(
        self, start: datetime, end: datetime, limit: int = 50, offset: int = 0
    ) -> List[AuthorizationAuditLog]:
        rows = self._newest_first(
            e for e in self.store.audit_logs.values() if start <= e.timestamp <= end
        )
        return rows[offset:offset + limit]

    async def find_all(self, limit: int = 50, offset: int = 0) -> List[AuthorizationAuditLog]:
        return self._newest_first(self.store.audit_logs.values())[offset:offset + limit]
