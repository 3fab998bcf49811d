"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import NeoPermissionsError
from .domain import (
    ValidationError,
    InvalidStateError,
    ResourceNotFoundError,
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


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,
    InvalidStateError: 400,

    # 403 Forbidden
    AuthorizationError: 403,
    ProtectedRoleError: 403,
    PermissionDeniedError: 403,

    # 404 Not Found
    ResourceNotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,
    DuplicateResourceError: 409,
    DuplicateRoleAssignmentError: 409,

    # 500 Internal Server Error
    ConfigurationError: 500,
    DatabaseError: 500,
    ConstraintViolationError: 500,
    TransactionError: 500,
    CacheError: 500,
    EventDispatchError: 500,

    # Default for NeoPermissionsError
    NeoPermissionsError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Resolve the status code for an exception, walking its class hierarchy."""
    for klass in type(exception).__mro__:
        if klass in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[klass]
    return 500
