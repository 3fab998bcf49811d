"""Pytest configuration and fixtures for neo-permissions tests."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from neo_permissions.config.governance import GovernanceConfig
from neo_permissions.config.settings import PermissionSettings
from neo_permissions.container import ServiceContainer
from neo_permissions.database.seed import seed_memory_store
from neo_permissions.features.assignments.entities import UserRole
from neo_permissions.features.assignments.services import (
    CascadingRevocationService,
    DelegationService,
    EffectivePermissionResolver,
    ResourcePermissionService,
    RoleAssignmentGovernor,
    RolePermissionService,
)
from neo_permissions.features.audit.services import AuditService
from neo_permissions.features.cache.adapters import MemoryPermissionCacheBackend
from neo_permissions.features.cache.services import PermissionCacheService
from neo_permissions.features.events.services import EventDispatcherService
from neo_permissions.features.storage.adapters import InMemoryStore, MemoryUnitOfWork
from neo_permissions.features.users.entities import User

BASE_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
SEED_TIME = BASE_TIME - timedelta(days=30)
ASSIGNED_TIME = BASE_TIME - timedelta(days=10)

# Users loaded into every seeded store, with the role each one holds.
SAMPLE_USERS = {
    "usr_admin": "SYSTEM_ADMIN",
    "usr_org_admin": "ORG_ADMIN",
    "usr_a": "MANAGER",
    "usr_b": "MANAGER",
    "usr_plain": "USER",
}


class FixedClock:
    """Controllable clock; ``advance`` moves time forward."""

    def __init__(self, now: datetime = BASE_TIME):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def add_user(store: InMemoryStore, user_id: str, at: datetime = SEED_TIME) -> User:
    user = User(
        id=user_id,
        external_subject=f"idp|{user_id}",
        email=f"{user_id}@example.com",
        display_name=user_id,
        created_at=at,
    )
    store.users[user_id] = user
    return user


def add_user_role(
    store: InMemoryStore,
    user_id: str,
    role_id: str,
    at: datetime = ASSIGNED_TIME,
    expires_at: datetime = None,
) -> UserRole:
    row_id = store.next_id("user_roles")
    user_role = UserRole(
        id=row_id,
        user_id=user_id,
        role_id=role_id,
        granted_at=at,
        granted_by="SYSTEM",
        expires_at=expires_at,
    )
    store.user_roles[row_id] = user_role
    return user_role


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store():
    """Seeded catalog plus the sample users and their roles."""
    store = seed_memory_store(InMemoryStore(), at=SEED_TIME)
    for user_id, role_id in SAMPLE_USERS.items():
        add_user(store, user_id)
        add_user_role(store, user_id, role_id)
    return store


@pytest.fixture
def uow(store):
    return MemoryUnitOfWork(store)


@pytest.fixture
def governance():
    return GovernanceConfig()


@pytest.fixture
def resolver(uow, clock):
    return EffectivePermissionResolver(uow, clock)


@pytest.fixture
def governor(uow, resolver, governance, clock):
    return RoleAssignmentGovernor(uow, resolver, governance, clock)


@pytest.fixture
def cascade(uow, clock):
    return CascadingRevocationService(uow, clock)


@pytest.fixture
def delegation_service(uow, clock):
    return DelegationService(uow, clock=clock)


@pytest.fixture
def resource_permission_service(uow, clock):
    return ResourcePermissionService(uow, clock)


@pytest.fixture
def role_permission_service(uow, clock):
    return RolePermissionService(uow, clock)


@pytest.fixture
def audit_service(uow, clock):
    return AuditService(uow, clock)


@pytest.fixture
def cache_backend():
    return MemoryPermissionCacheBackend()


@pytest.fixture
def cache_service(cache_backend):
    return PermissionCacheService(cache_backend, ttl=300)


@pytest.fixture
def published(uow):
    """Collects every event the unit of work releases after commit."""
    events = []

    class _Collector:
        def publish(self, event):
            events.append(event)

    uow.set_publisher(_Collector())
    return events


@pytest_asyncio.fixture
async def dispatcher():
    dispatcher = EventDispatcherService()
    await dispatcher.start()
    yield dispatcher
    await dispatcher.stop()


@pytest.fixture
def settings():
    return PermissionSettings(_env_file=None)


@pytest.fixture
def container(store, settings, clock):
    return ServiceContainer(
        MemoryUnitOfWork(store),
        cache_backend=MemoryPermissionCacheBackend(),
        settings=settings,
        clock=clock,
    )


@pytest.fixture
def make_user(store):
    """Insert an extra user directly into the store."""
    def _make(user_id: str, at: datetime = SEED_TIME) -> User:
        return add_user(store, user_id, at)
    return _make


@pytest.fixture
def give_role(store):
    """Insert a user-role row directly, bypassing governance."""
    def _give(user_id: str, role_id: str, at: datetime = ASSIGNED_TIME, expires_at: datetime = None) -> UserRole:
        return add_user_role(store, user_id, role_id, at, expires_at)
    return _give
