"""Infrastructure exceptions for neo-permissions.

Raised by storage, cache and event plumbing rather than by domain rules.
"""

from .base import NeoPermissionsError


# Configuration Errors
class ConfigurationError(NeoPermissionsError):
    """Raised when there's a configuration issue."""
    pass


# Database Errors
class DatabaseError(NeoPermissionsError):
    """Base class for database-related errors."""
    pass


class ConstraintViolationError(DatabaseError):
    """Raised when a write breaks a uniqueness or integrity constraint."""

    def __init__(self, message: str, constraint: str = None):
        super().__init__(
            message,
            error_code="CONSTRAINT_VIOLATION",
            details={"constraint": constraint} if constraint else {},
        )
        self.constraint = constraint


class TransactionError(DatabaseError):
    """Raised when a unit of work cannot be committed."""
    pass


# Cache Errors
class CacheError(NeoPermissionsError):
    """Base class for cache-related errors."""
    pass


# Event Errors
class EventDispatchError(NeoPermissionsError):
    """Raised when the event dispatcher is used in an invalid state."""
    pass
