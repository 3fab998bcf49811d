"""Role and permission repositories."""

from .role_repository import AsyncPGRoleRepository
from .permission_repository import AsyncPGPermissionRepository

__all__ = ["AsyncPGRoleRepository", "AsyncPGPermissionRepository"]
