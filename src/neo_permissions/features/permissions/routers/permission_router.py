"""Permission catalog router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ....api.dependencies import get_container, get_current_user_id
from ....container import ServiceContainer
from ...assignments.models import CascadeResultResponse
from ..models import CreatePermissionRequest, PermissionResponse

permission_router = APIRouter(
    prefix="/permissions",
    tags=["Permissions"],
    responses={404: {"description": "Permission not found"}},
)


@permission_router.get("", response_model=List[PermissionResponse], summary="List active permissions")
async def list_permissions(
    resource_type: Optional[str] = Query(None, description="Filter by resource type"),
    container: ServiceContainer = Depends(get_container),
) -> List[PermissionResponse]:
    permissions = await container.permission_catalog.list_permissions(resource_type)
    return [PermissionResponse.from_entity(permission) for permission in permissions]


@permission_router.post(
    "", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED, summary="Create permission"
)
async def create_permission(
    request: CreatePermissionRequest,
    container: ServiceContainer = Depends(get_container),
) -> PermissionResponse:
    permission = await container.permission_catalog.create_permission(
        request.id,
        request.name,
        request.description,
        resource_type=request.resource_type,
        action=request.action,
    )
    return PermissionResponse.from_entity(permission)


@permission_router.get("/{permission_id}", response_model=PermissionResponse, summary="Get permission")
async def get_permission(
    permission_id: str, container: ServiceContainer = Depends(get_container)
) -> PermissionResponse:
    return PermissionResponse.from_entity(await container.permission_catalog.get_permission(permission_id))


@permission_router.delete(
    "/{permission_id}",
    response_model=CascadeResultResponse,
    summary="Soft-delete permission",
    description="Revokes the permission from every role, then soft-deletes it",
)
async def delete_permission(
    permission_id: str,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> CascadeResultResponse:
    result = await container.permission_catalog.delete_permission(permission_id, current_user_id)
    return CascadeResultResponse.from_result(result)


@permission_router.post(
    "/{permission_id}/restore", response_model=PermissionResponse, summary="Restore permission"
)
async def restore_permission(
    permission_id: str, container: ServiceContainer = Depends(get_container)
) -> PermissionResponse:
    return PermissionResponse.from_entity(await container.permission_catalog.restore_permission(permission_id))
