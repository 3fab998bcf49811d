"""Shared router dependencies.

The container is attached to ``app.state`` by ``create_app``; every router
resolves its services from there.
"""

from fastapi import Header, Request

from ..container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_current_user_id(
    x_user_id: str = Header(..., alias="X-User-Id", min_length=1, description="Acting user ID"),
) -> str:
    """Acting user id. Authentication happens upstream of this service."""
    return x_user_id


def get_client_ip(request: Request):
    return request.client.host if request.client else None
