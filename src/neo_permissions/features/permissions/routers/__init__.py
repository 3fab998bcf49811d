"""Role and permission routers."""

from .role_router import role_router
from .permission_router import permission_router

__all__ = ["role_router", "permission_router"]
