"""User router.

Covers the user directory plus the per-user views of the permission model:
effective permissions, role assignments, delegations and resource grants.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ....api.dependencies import get_client_ip, get_container, get_current_user_id
from ....config.constants import AuditDecision
from ....container import ServiceContainer
from ...assignments.models import (
    AccessCheckResponse,
    AssignRoleRequest,
    CascadeResultResponse,
    DelegationsSummaryResponse,
    EffectivePermissionsResponse,
    ResourcePermissionResponse,
    UserRoleResponse,
)
from ...permissions.models import RoleResponse
from ..models import SyncUserRequest, UserResponse

user_router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        403: {"description": "Insufficient permissions"},
        404: {"description": "User not found"},
    },
)


@user_router.get("", response_model=List[UserResponse], summary="List active users")
async def list_users(container: ServiceContainer = Depends(get_container)) -> List[UserResponse]:
    users = await container.users.list_users()
    return [UserResponse.from_entity(user) for user in users]


@user_router.post("/sync", response_model=UserResponse, summary="Create or update a user from the identity provider")
async def sync_user(
    request: SyncUserRequest,
    container: ServiceContainer = Depends(get_container),
) -> UserResponse:
    user = await container.user_sync.sync_user(
        request.external_subject, request.email, request.display_name
    )
    return UserResponse.from_entity(user)


@user_router.get("/{user_id}", response_model=UserResponse, summary="Get user")
async def get_user(user_id: str, container: ServiceContainer = Depends(get_container)) -> UserResponse:
    return UserResponse.from_entity(await container.users.get_user(user_id))


@user_router.delete(
    "/{user_id}",
    response_model=CascadeResultResponse,
    summary="Soft-delete a user",
    description="Revokes every role, resource grant and delegation of the user, then soft-deletes it",
)
async def delete_user(
    user_id: str,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> CascadeResultResponse:
    result = await container.users.delete_user(user_id, current_user_id)
    return CascadeResultResponse.from_result(result)


@user_router.post("/{user_id}/restore", response_model=UserResponse, summary="Restore a soft-deleted user")
async def restore_user(user_id: str, container: ServiceContainer = Depends(get_container)) -> UserResponse:
    return UserResponse.from_entity(await container.users.restore_user(user_id))


@user_router.get(
    "/{user_id}/permissions",
    response_model=EffectivePermissionsResponse,
    summary="Get effective permissions",
    description="Current permissions, or the permissions held at `at` when given",
)
async def get_effective_permissions(
    user_id: str,
    at: Optional[datetime] = Query(None, description="Point in time for historical queries"),
    container: ServiceContainer = Depends(get_container),
) -> EffectivePermissionsResponse:
    if at is not None:
        result = await container.permissions.get_permissions_at_point_in_time(user_id, at)
        return EffectivePermissionsResponse.from_result(user_id, result, point_in_time=at)
    result = await container.permissions.get_effective_permissions(user_id)
    return EffectivePermissionsResponse.from_result(user_id, result)


@user_router.get(
    "/{user_id}/permissions/check",
    response_model=AccessCheckResponse,
    summary="Check a permission",
)
async def check_permission(
    user_id: str,
    request: Request,
    permission: str = Query(..., min_length=1, description="Permission id to check"),
    container: ServiceContainer = Depends(get_container),
) -> AccessCheckResponse:
    allowed = await container.permissions.has_permission(user_id, permission)
    await container.audit.record(
        action=permission,
        decision=AuditDecision.GRANTED if allowed else AuditDecision.DENIED,
        user_id=user_id,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return AccessCheckResponse(user_id=user_id, permission=permission, allowed=allowed)


@user_router.get("/{user_id}/roles", response_model=List[RoleResponse], summary="List the user's active roles")
async def get_user_roles(user_id: str, container: ServiceContainer = Depends(get_container)) -> List[RoleResponse]:
    roles = await container.permissions.get_user_roles(user_id)
    return [RoleResponse.from_entity(role) for role in roles]


@user_router.post(
    "/{user_id}/roles",
    response_model=UserRoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign a role",
)
async def assign_role(
    user_id: str,
    request: AssignRoleRequest,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> UserRoleResponse:
    user_role = await container.permissions.assign_role(user_id, request.role_id, current_user_id)
    return UserRoleResponse.from_entity(user_role)


@user_router.delete("/{user_id}/roles/{role_id}", response_model=UserRoleResponse, summary="Revoke a role")
async def revoke_role(
    user_id: str,
    role_id: str,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> UserRoleResponse:
    user_role = await container.permissions.revoke_role(user_id, role_id, current_user_id)
    return UserRoleResponse.from_entity(user_role)


@user_router.get(
    "/{user_id}/delegations",
    response_model=DelegationsSummaryResponse,
    summary="Active delegations given and received",
)
async def get_user_delegations(
    user_id: str, container: ServiceContainer = Depends(get_container)
) -> DelegationsSummaryResponse:
    summary = await container.delegations.get_delegations_for_user(user_id)
    return DelegationsSummaryResponse.from_summary(summary)


@user_router.get(
    "/{user_id}/resource-permissions",
    response_model=List[ResourcePermissionResponse],
    summary="Active resource grants of the user",
)
async def get_user_resource_permissions(
    user_id: str, container: ServiceContainer = Depends(get_container)
) -> List[ResourcePermissionResponse]:
    grants = await container.resource_permissions.get_for_user(user_id)
    return [ResourcePermissionResponse.from_entity(grant) for grant in grants]
