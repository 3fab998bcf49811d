"""Resource permission router."""

from fastapi import APIRouter, Depends, Query, status

from ....api.dependencies import get_container, get_current_user_id
from ....container import ServiceContainer
from ..models import AccessCheckResponse, GrantResourcePermissionRequest, ResourcePermissionResponse

resource_permission_router = APIRouter(
    prefix="/resource-permissions",
    tags=["Resource Permissions"],
    responses={
        404: {"description": "Grant or user not found"},
        409: {"description": "Active grant already exists"},
    },
)


@resource_permission_router.post(
    "",
    response_model=ResourcePermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Grant a permission on one resource",
)
async def grant_resource_permission(
    request: GrantResourcePermissionRequest,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> ResourcePermissionResponse:
    grant = await container.resource_permissions.grant_permission(
        request.user_id,
        request.resource_type,
        request.resource_id,
        request.permission,
        current_user_id,
        expires_at=request.expires_at,
        reason=request.reason,
    )
    return ResourcePermissionResponse.from_entity(grant)


@resource_permission_router.delete(
    "/{grant_id}", response_model=ResourcePermissionResponse, summary="Revoke resource permission"
)
async def revoke_resource_permission(
    grant_id: int,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> ResourcePermissionResponse:
    grant = await container.resource_permissions.revoke_permission(grant_id, current_user_id)
    return ResourcePermissionResponse.from_entity(grant)


@resource_permission_router.get("/check", response_model=AccessCheckResponse, summary="Check a resource permission")
async def check_resource_permission(
    user_id: str = Query(...),
    resource_type: str = Query(...),
    resource_id: str = Query(...),
    permission: str = Query(...),
    container: ServiceContainer = Depends(get_container),
) -> AccessCheckResponse:
    allowed = await container.resource_permissions.has_resource_permission(
        user_id, resource_type, resource_id, permission
    )
    return AccessCheckResponse(
        user_id=user_id,
        permission=permission,
        allowed=allowed,
        resource_type=resource_type,
        resource_id=resource_id,
    )
