"""Temporal assignment entities and protocols."""

from .user_role import UserRole
from .role_permission import RolePermission
from .resource_permission import ResourcePermission
from .delegation import Delegation
from .results import EffectivePermissions, DelegationsSummary, CascadeResult
from .protocols import (
    UserRoleRepository,
    RolePermissionRepository,
    ResourcePermissionRepository,
    DelegationRepository,
)

__all__ = [
    "UserRole",
    "RolePermission",
    "ResourcePermission",
    "Delegation",
    "EffectivePermissions",
    "DelegationsSummary",
    "CascadeResult",
    "UserRoleRepository",
    "RolePermissionRepository",
    "ResourcePermissionRepository",
    "DelegationRepository",
]
