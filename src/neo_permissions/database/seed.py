"""Default authorization data.

Mirrors ``migrations/002_seed_default_data.sql`` so the in-process store can
be seeded with the same catalog the SQL schema ships with.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..config.constants import SYSTEM_USER_ID
from ..features.assignments.entities import RolePermission
from ..features.permissions.entities import Permission, Role, split_permission_id
from ..features.storage.adapters.memory_store import InMemoryStore
from ..features.users.entities import User
from ..utils.time import utc_now

SYSTEM_USER = {
    "id": SYSTEM_USER_ID,
    "external_subject": "system|internal",
    "email": "system@neo-permissions.local",
    "display_name": "System",
}

DEFAULT_ROLES: List[Tuple[str, str, str]] = [
    ("SYSTEM_ADMIN", "System Administrator",
     "Platform administration. Cannot be assigned via API."),
    ("ORG_ADMIN", "Organization Administrator",
     "Manages users and assigns basic roles within the organization"),
    ("MANAGER", "Manager", "Team oversight, can view team data and approve operations"),
    ("ACCOUNTANT", "Accountant", "Professional access to delegated accounts"),
    ("AUDITOR", "Auditor", "Read-only compliance access"),
    ("USER", "User", "Self-service access to own resources"),
]

DEFAULT_PERMISSIONS: List[Tuple[str, str]] = [
    ("users:read", "Read Users"),
    ("users:write", "Write Users"),
    ("users:delete", "Delete Users"),
    ("transactions:read", "Read Transactions"),
    ("transactions:write", "Write Transactions"),
    ("transactions:delete", "Delete Transactions"),
    ("transactions:approve", "Approve Transactions"),
    ("transactions:bulk", "Bulk Transaction Operations"),
    ("accounts:read", "Read Accounts"),
    ("accounts:write", "Write Accounts"),
    ("accounts:delete", "Delete Accounts"),
    ("accounts:delegate", "Delegate Accounts"),
    ("budgets:read", "Read Budgets"),
    ("budgets:write", "Write Budgets"),
    ("budgets:delete", "Delete Budgets"),
    ("audit:read", "Read Audit Logs"),
    ("reports:export", "Export Reports"),
    ("roles:read", "View Roles"),
    ("roles:write", "Create/Modify Roles"),
    ("roles:delete", "Delete Roles"),
    ("permissions:read", "View Permissions"),
    ("permissions:write", "Create/Modify Permissions"),
    ("user-roles:assign-basic", "Assign Basic Roles"),
    ("user-roles:assign-elevated", "Assign Elevated Roles"),
    ("user-roles:revoke", "Revoke User Roles"),
]

# SYSTEM_ADMIN receives every permission.
DEFAULT_ROLE_PERMISSIONS: Dict[str, List[str]] = {
    "SYSTEM_ADMIN": [permission_id for permission_id, _ in DEFAULT_PERMISSIONS],
    "ORG_ADMIN": [
        "users:read", "users:write", "users:delete",
        "transactions:read", "accounts:read", "budgets:read",
        "audit:read", "reports:export",
        "roles:read", "user-roles:assign-basic", "user-roles:revoke",
    ],
    "MANAGER": [
        "users:read", "transactions:read", "transactions:approve",
        "accounts:read", "budgets:read", "reports:export",
    ],
    "ACCOUNTANT": [
        "transactions:read", "transactions:write", "transactions:approve",
        "accounts:read", "reports:export",
    ],
    "AUDITOR": [
        "users:read", "transactions:read", "accounts:read",
        "budgets:read", "audit:read", "reports:export",
    ],
    "USER": [
        "transactions:read", "transactions:write", "transactions:delete",
        "accounts:read", "accounts:write", "accounts:delegate",
        "budgets:read", "budgets:write",
    ],
}

# Resource types are singular in the catalog: "transactions:read" -> "transaction".
_RESOURCE_TYPE_OVERRIDES = {"user-roles": "user-role", "audit": "audit"}


def _resource_type(resource: str) -> str:
    if resource in _RESOURCE_TYPE_OVERRIDES:
        return _RESOURCE_TYPE_OVERRIDES[resource]
    return resource[:-1] if resource.endswith("s") else resource


def seed_memory_store(store: InMemoryStore, at: Optional[datetime] = None) -> InMemoryStore:
    """Load the system user, default roles, permissions and role grants."""
    at = at or utc_now()

    store.users[SYSTEM_USER_ID] = User(created_at=at, **SYSTEM_USER)

    for role_id, name, description in DEFAULT_ROLES:
        store.roles[role_id] = Role(
            id=role_id, name=name, description=description, is_system=True, created_at=at
        )

    for permission_id, name in DEFAULT_PERMISSIONS:
        resource, action = split_permission_id(permission_id)
        store.permissions[permission_id] = Permission(
            id=permission_id,
            name=name,
            resource_type=_resource_type(resource),
            action=action,
            created_at=at,
        )

    for role_id, permission_ids in DEFAULT_ROLE_PERMISSIONS.items():
        for permission_id in permission_ids:
            grant_id = store.next_id("role_permissions")
            store.role_permissions[grant_id] = RolePermission(
                id=grant_id,
                role_id=role_id,
                permission_id=permission_id,
                granted_at=at,
                granted_by=SYSTEM_USER_ID,
            )
    return store
