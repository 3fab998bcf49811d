"""Exception hierarchy for neo-permissions."""

from .base import NeoPermissionsError, get_http_status_code, create_error_response
from .domain import (
    ValidationError,
    InvalidStateError,
    ResourceNotFoundError,
    UserNotFoundError,
    RoleNotFoundError,
    PermissionNotFoundError,
    DelegationNotFoundError,
    ResourcePermissionNotFoundError,
    AssignmentNotFoundError,
    AuthorizationError,
    ProtectedRoleError,
    PermissionDeniedError,
    ConflictError,
    DuplicateResourceError,
    DuplicateRoleAssignmentError,
)
from .infrastructure import (
    ConfigurationError,
    DatabaseError,
    ConstraintViolationError,
    TransactionError,
    CacheError,
    EventDispatchError,
)
from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    "NeoPermissionsError",
    "get_http_status_code",
    "create_error_response",
    "HTTP_STATUS_MAP",
    "ValidationError",
    "InvalidStateError",
    "ResourceNotFoundError",
    "UserNotFoundError",
    "RoleNotFoundError",
    "PermissionNotFoundError",
    "DelegationNotFoundError",
    "ResourcePermissionNotFoundError",
    "AssignmentNotFoundError",
    "AuthorizationError",
    "ProtectedRoleError",
    "PermissionDeniedError",
    "ConflictError",
    "DuplicateResourceError",
    "DuplicateRoleAssignmentError",
    "ConfigurationError",
    "DatabaseError",
    "ConstraintViolationError",
    "TransactionError",
    "CacheError",
    "EventDispatchError",
]
