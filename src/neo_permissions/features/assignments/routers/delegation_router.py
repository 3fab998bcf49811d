"""Delegation router."""

from fastapi import APIRouter, Depends, Query, status

from ....api.dependencies import get_container, get_current_user_id
from ....container import ServiceContainer
from ..models import AccessCheckResponse, CreateDelegationRequest, DelegationResponse

delegation_router = APIRouter(
    prefix="/delegations",
    tags=["Delegations"],
    responses={404: {"description": "Delegation or delegatee not found"}},
)


@delegation_router.post(
    "",
    response_model=DelegationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Delegate access",
    description="The acting user becomes the delegator",
)
async def create_delegation(
    request: CreateDelegationRequest,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> DelegationResponse:
    delegation = await container.delegations.create_delegation(
        current_user_id,
        request.delegatee_id,
        request.scope,
        resource_type=request.resource_type,
        resource_ids=request.resource_ids,
        valid_until=request.valid_until,
        reason=request.reason,
    )
    return DelegationResponse.from_entity(delegation)


@delegation_router.delete("/{delegation_id}", response_model=DelegationResponse, summary="Revoke delegation")
async def revoke_delegation(
    delegation_id: int,
    container: ServiceContainer = Depends(get_container),
    current_user_id: str = Depends(get_current_user_id),
) -> DelegationResponse:
    delegation = await container.delegations.revoke_delegation(delegation_id, current_user_id)
    return DelegationResponse.from_entity(delegation)


@delegation_router.get("/check", response_model=AccessCheckResponse, summary="Check delegated access")
async def check_delegated_access(
    user_id: str = Query(..., description="Delegatee"),
    resource_type: str = Query(...),
    resource_id: str = Query(...),
    permission: str = Query(...),
    container: ServiceContainer = Depends(get_container),
) -> AccessCheckResponse:
    allowed = await container.delegations.has_delegated_access(
        user_id, resource_type, resource_id, permission
    )
    return AccessCheckResponse(
        user_id=user_id,
        permission=permission,
        allowed=allowed,
        resource_type=resource_type,
        resource_id=resource_id,
    )
