"""Role and permission catalog services."""

from .permission_service import PermissionService
from .role_service import RoleService
from .permission_catalog_service import PermissionCatalogService

__all__ = ["PermissionService", "RoleService", "PermissionCatalogService"]
