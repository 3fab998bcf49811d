"""Role and permission catalog entities."""

from .role import Role
from .permission import Permission, split_permission_id
from .protocols import RoleRepository, PermissionRepository

__all__ = [
    "Role",
    "Permission",
    "split_permission_id",
    "RoleRepository",
    "PermissionRepository",
]
