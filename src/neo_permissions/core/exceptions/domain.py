"""Domain-specific exceptions for neo-permissions.

These relate to the authorization model itself: missing entities,
governance violations and duplicate temporal assignments.
"""

from typing import Any, Dict, Optional

from .base import NeoPermissionsError


# Validation Errors
class ValidationError(NeoPermissionsError):
    """Raised when input fails domain validation."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if field:
            details.setdefault("field", field)
        super().__init__(message, error_code=kwargs.pop("error_code", "VALIDATION_ERROR"), details=details)


class InvalidStateError(NeoPermissionsError):
    """Raised when an entity is not in the state an operation requires."""

    def __init__(self, message: str, entity_type: str, entity_id: Any):
        super().__init__(
            message,
            error_code="INVALID_STATE",
            details={"entity_type": entity_type, "entity_id": str(entity_id)},
        )


# Not Found Errors
class ResourceNotFoundError(NeoPermissionsError):
    """Raised when a requested entity does not exist or is soft-deleted."""

    entity_type = "resource"

    def __init__(
        self,
        entity_id: Any,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.entity_id = entity_id
        merged = {"entity_type": self.entity_type, "entity_id": str(entity_id)}
        merged.update(details or {})
        super().__init__(
            message or f"{self.entity_type.replace('_', ' ').capitalize()} not found: {entity_id}",
            error_code=f"{self.entity_type.upper()}_NOT_FOUND",
            details=merged,
        )


class UserNotFoundError(ResourceNotFoundError):
    entity_type = "user"


class RoleNotFoundError(ResourceNotFoundError):
    entity_type = "role"


class PermissionNotFoundError(ResourceNotFoundError):
    entity_type = "permission"


class DelegationNotFoundError(ResourceNotFoundError):
    entity_type = "delegation"


class ResourcePermissionNotFoundError(ResourceNotFoundError):
    entity_type = "resource_permission"


class AssignmentNotFoundError(ResourceNotFoundError):
    """Raised when no active assignment row exists for a compound key."""

    entity_type = "assignment"

    def __init__(self, message: str, **keys: Any):
        entity_id = ":".join(str(value) for value in keys.values())
        super().__init__(
            entity_id,
            message=message,
            details={key: str(value) for key, value in keys.items()},
        )


# Authorization Errors
class AuthorizationError(NeoPermissionsError):
    """Base class for governance failures."""
    pass


class ProtectedRoleError(AuthorizationError):
    """Raised when the protected role is touched through the API."""

    def __init__(self, role_id: str, operation: str):
        super().__init__(
            f"{role_id} role cannot be {operation} via API. Use database directly.",
            error_code="PROTECTED_ROLE_VIOLATION",
            details={"role_id": role_id, "operation": operation},
        )


class PermissionDeniedError(AuthorizationError):
    """Raised when the acting user lacks the permission a governance tier requires."""

    def __init__(
        self,
        message: str,
        error_code: str,
        actor_id: str,
        required_permission: str,
        role_id: Optional[str] = None,
        tier: Optional[str] = None,
    ):
        self.required_permission = required_permission
        details = {"actor_id": actor_id, "required_permission": required_permission}
        if role_id is not None:
            details["role_id"] = role_id
        if tier is not None:
            details["tier"] = tier
        super().__init__(message, error_code=error_code, details=details)


# Conflict Errors
class ConflictError(NeoPermissionsError):
    """Base class for state conflicts."""
    pass


class DuplicateResourceError(ConflictError):
    """Raised when a uniqueness rule among active entities would be broken."""

    def __init__(self, entity_type: str, field: str, value: Any):
        super().__init__(
            f"Active {entity_type} with {field} '{value}' already exists",
            error_code="DUPLICATE_RESOURCE",
            details={"entity_type": entity_type, "field": field, "value": str(value)},
        )


class DuplicateRoleAssignmentError(ConflictError):
    """Raised when the user already holds an active assignment of the role."""

    def __init__(self, user_id: str, role_id: str):
        super().__init__(
            f"User {user_id} already has role {role_id}",
            error_code="DUPLICATE_ROLE_ASSIGNMENT",
            details={"user_id": user_id, "role_id": role_id},
        )
