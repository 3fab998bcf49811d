"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..__version__ import __version__
from ..config.logging_config import setup_logging
from ..container import ServiceContainer
from ..core.exceptions import NeoPermissionsError, create_error_response, get_http_status_code
from ..features.assignments.routers import delegation_router, resource_permission_router
from ..features.audit.routers import audit_router
from ..features.permissions.routers import permission_router, role_router
from ..features.users.routers import user_router

logger = logging.getLogger(__name__)

API_PREFIX = "/v1"


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """Build the application. Without a container one is created from settings."""
    if container is None:
        container = ServiceContainer.from_settings()
    setup_logging(container.settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.startup()
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(
        title=container.settings.app_name,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    @app.exception_handler(NeoPermissionsError)
    async def neo_permissions_error_handler(request: Request, exc: NeoPermissionsError) -> JSONResponse:
        status_code = get_http_status_code(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.error_code} {exc.message}")
        return JSONResponse(status_code=status_code, content=create_error_response(exc))

    for router in (
        user_router,
        role_router,
        permission_router,
        delegation_router,
        resource_permission_router,
        audit_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {**await container.health(), "version": __version__}

    return app
