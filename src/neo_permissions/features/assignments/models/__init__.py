"""Assignment API models."""

from .requests import AssignRoleRequest, GrantResourcePermissionRequest, CreateDelegationRequest
from .responses import (
    UserRoleResponse,
    RolePermissionResponse,
    ResourcePermissionResponse,
    DelegationResponse,
    DelegationsSummaryResponse,
    EffectivePermissionsResponse,
    CascadeResultResponse,
    AccessCheckResponse,
)

__all__ = [
    "AssignRoleRequest",
    "GrantResourcePermissionRequest",
    "CreateDelegationRequest",
    "UserRoleResponse",
    "RolePermissionResponse",
    "ResourcePermissionResponse",
    "DelegationResponse",
    "DelegationsSummaryResponse",
    "EffectivePermissionsResponse",
    "CascadeResultResponse",
    "AccessCheckResponse",
]
