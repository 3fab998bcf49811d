"""Neo-Permissions - temporal role-based authorization service.

Resolves effective permissions now and at past instants, governs role
assignment by tier, cascades revocations on soft delete and evaluates
user-to-user delegations.
"""

from .__version__ import __version__
from .config import GovernanceConfig, PermissionSettings, get_settings
from .core.exceptions import (
    NeoPermissionsError,
    ValidationError,
    ResourceNotFoundError,
    AuthorizationError,
    ProtectedRoleError,
    PermissionDeniedError,
    DuplicateRoleAssignmentError,
    get_http_status_code,
    create_error_response,
)

__all__ = [
    "__version__",
    "GovernanceConfig",
    "PermissionSettings",
    "get_settings",
    "NeoPermissionsError",
    "ValidationError",
    "ResourceNotFoundError",
    "AuthorizationError",
    "ProtectedRoleError",
    "PermissionDeniedError",
    "DuplicateRoleAssignmentError",
    "get_http_status_code",
    "create_error_response",
]
