"""Audit router."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ....api.dependencies import get_container
from ....container import ServiceContainer
from ..entities import AuditQueryFilter
from ..models import AuditLogListResponse, AuditLogResponse

audit_router = APIRouter(prefix="/audit", tags=["Audit"])


@audit_router.get(
    "",
    response_model=AuditLogListResponse,
    summary="Query the authorization audit log",
    description="Newest first. `user_id` takes precedence over a start/end range",
)
async def query_audit_log(
    user_id: Optional[str] = Query(None),
    start_time: Optional[datetime] = Query(None),
    end_time: Optional[datetime] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    container: ServiceContainer = Depends(get_container),
) -> AuditLogListResponse:
    entries = await container.audit.query(
        AuditQueryFilter(user_id=user_id, start_time=start_time, end_time=end_time),
        limit=limit,
        offset=offset,
    )
    return AuditLogListResponse(
        entries=[AuditLogResponse.from_entity(entry) for entry in entries],
        limit=limit,
        offset=offset,
    )
