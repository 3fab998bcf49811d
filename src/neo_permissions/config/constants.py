"""Shared enums and constants for the authorization model."""

from enum import Enum


class DelegationScope(str, Enum):
    """How much of the delegator's access a delegation hands over."""
    FULL = "full"
    READ_ONLY = "read_only"
    TRANSACTIONS_ONLY = "transactions_only"


class AuditDecision(str, Enum):
    """Outcome recorded in the authorization audit log."""
    GRANTED = "GRANTED"
    DENIED = "DENIED"


class PermissionChangeAction(str, Enum):
    """Action tags carried by permission change events."""
    ROLE_ASSIGNED = "ROLE_ASSIGNED"
    ROLE_REVOKED = "ROLE_REVOKED"
    CASCADING_REVOCATION = "CASCADING_REVOCATION"
    DELEGATION_CREATED = "DELEGATION_CREATED"
    DELEGATION_REVOKED = "DELEGATION_REVOKED"
    USER_DELETED = "USER_DELETED"
    USER_RESTORED = "USER_RESTORED"
    RESOURCE_PERMISSION_GRANTED = "RESOURCE_PERMISSION_GRANTED"
    RESOURCE_PERMISSION_REVOKED = "RESOURCE_PERMISSION_REVOKED"
    ROLE_PERMISSION_GRANTED = "ROLE_PERMISSION_GRANTED"
    ROLE_PERMISSION_REVOKED = "ROLE_PERMISSION_REVOKED"


class RoleTier(str, Enum):
    """Governance tier of a role."""
    BASIC = "basic"
    ELEVATED = "elevated"
    CUSTOM = "custom"


class CascadeEntityType(str, Enum):
    """Entity kinds whose soft delete triggers cascading revocation."""
    USER = "user"
    ROLE = "role"
    PERMISSION = "permission"


# Governance permissions
ASSIGN_BASIC_PERMISSION = "user-roles:assign-basic"
ASSIGN_ELEVATED_PERMISSION = "user-roles:assign-elevated"
REVOKE_ROLE_PERMISSION = "user-roles:revoke"

# Default governance tables
DEFAULT_PROTECTED_ROLE = "SYSTEM_ADMIN"
DEFAULT_BASIC_ROLES = frozenset({"USER", "ACCOUNTANT", "AUDITOR"})
DEFAULT_ELEVATED_ROLES = frozenset({"MANAGER", "ORG_ADMIN"})
DEFAULT_ROLE = "USER"
SYSTEM_USER_ID = "SYSTEM"

# Identifier prefixes
USER_ID_PREFIX = "usr_"
ROLE_ID_PREFIX = "role_"

# Delegation scope matching
READ_ONLY_ACTION_SUFFIXES = (":read", ":list")
TRANSACTION_RESOURCE_TYPE = "transaction"
