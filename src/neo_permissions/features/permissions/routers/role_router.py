"""Role router."""

from typing import List

from fastapi import APIRouter, Depends, status

from ....api.dependencies import get_container, get_current_user_id
from ....container import ServiceContainer
from ...assignments.models import CascadeResultResponse, RolePermissionResponse
from ..models import (
    CreateRoleRequest,
    GrantRolePermissionRequest,
    RolePermissionsResponse,
    RoleResponse,
    UpdateRoleRequest,
)

role_router = APIRouter(
    prefix="/roles",
    tags=["Roles"],
    responses={
        403: {"description": "Protected role"},
        404: {"description": "Role not found"},
        409: {"description": "Role name already in use"},
    },
)


@role_router.get("", response_model=List[RoleResponse], summary="List active roles")
async def list_roles(container: ServiceContainer = Depends(get_container)) -> List[RoleResponse]:
    return [RoleResponse.from_entity(role) for role in await container.roles.list_roles()]


@role_router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED, summary="Create role")
async def create_role(
    request: CreateRoleRequest,
    container: ServiceContainer = Depends(get_container),
) -> RoleResponse:
    role = await container.roles.create_role(
        request.name, request.description, request.parent_role_id
    )
    return RoleResponse.from_entity(role)


@role_router.get("/{role_id}", response_model=RoleResponse, summary="Get role")
async def get_role(role_id: str, container: ServiceContainer = Depends(get_container)) -> RoleResponse:
    return RoleResponse.from_entity(await container.roles.get_role(role_id))


@role_router.put("/{role_id}", response_model=RoleResponse, summary="Update role")
async def update_role(
    role_id: str,
    request: UpdateRoleRequest,
    container: ServiceContainer = Depends(get_container),
) -> RoleResponse:
    role = await container.roles.update_role(
        role_id, request.name, request.description, request.parent_role_id
    )
    return RoleResponse.from_entity(role)


@role_router.delete(
    "/{role_id}",
    response_model=CascadeResultResponse,
    summary="Soft-delete role",
    description="Revokes the role from every holder and strips its permissions, then soft-deletes it",
)
async def delete_role(
    role_id: str,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> CascadeResultResponse:
    result = await container.roles.delete_role(role_id, current_user_id)
    return CascadeResultResponse.from_result(result)


@role_router.post("/{role_id}/restore", response_model=RoleResponse, summary="Restore role")
async def restore_role(role_id: str, container: ServiceContainer = Depends(get_container)) -> RoleResponse:
    return RoleResponse.from_entity(await container.roles.restore_role(role_id))


@role_router.get("/{role_id}/permissions", response_model=RolePermissionsResponse, summary="List role permissions")
async def list_role_permissions(
    role_id: str, container: ServiceContainer = Depends(get_container)
) -> RolePermissionsResponse:
    permission_ids = await container.role_permissions.list_role_permissions(role_id)
    return RolePermissionsResponse(role_id=role_id, permission_ids=permission_ids)


@role_router.post(
    "/{role_id}/permissions",
    response_model=RolePermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Grant a permission to the role",
)
async def grant_role_permission(
    role_id: str,
    request: GrantRolePermissionRequest,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> RolePermissionResponse:
    grant = await container.role_permissions.grant_permission_to_role(
        role_id, request.permission_id, current_user_id
    )
    return RolePermissionResponse.from_entity(grant)


@role_router.delete(
    "/{role_id}/permissions/{permission_id}",
    response_model=RolePermissionResponse,
    summary="Revoke a permission from the role",
)
async def revoke_role_permission(
    role_id: str,
    permission_id: str,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> RolePermissionResponse:
    grant = await container.role_permissions.revoke_permission_from_role(
        role_id, permission_id, current_user_id
    )
    return RolePermissionResponse.from_entity(grant)
