"""Role and permission API models."""

from .requests import (
    CreateRoleRequest,
    UpdateRoleRequest,
    CreatePermissionRequest,
    GrantRolePermissionRequest,
)
from .responses import RoleResponse, PermissionResponse, RolePermissionsResponse

__all__ = [
    "CreateRoleRequest",
    "UpdateRoleRequest",
    "CreatePermissionRequest",
    "GrantRolePermissionRequest",
    "RoleResponse",
    "PermissionResponse",
    "RolePermissionsResponse",
]
