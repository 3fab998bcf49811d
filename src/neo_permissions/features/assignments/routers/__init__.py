"""Assignment routers."""

from .delegation_router import delegation_router
from .resource_permission_router import resource_permission_router

__all__ = ["delegation_router", "resource_permission_router"]
