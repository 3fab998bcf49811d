"""Temporal assignment repositories."""

from .user_role_repository import AsyncPGUserRoleRepository
from .role_permission_repository import AsyncPGRolePermissionRepository
from .resource_permission_repository import AsyncPGResourcePermissionRepository
from .delegation_repository import AsyncPGDelegationRepository

__all__ = [
    "AsyncPGUserRoleRepository",
    "AsyncPGRolePermissionRepository",
    "AsyncPGResourcePermissionRepository",
    "AsyncPGDelegationRepository",
]
