"""neo-permissions server entry point."""

import logging
import os

import uvicorn

from .config.logging_config import setup_logging
from .config.settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the application."""
    settings = get_settings()
    setup_logging(settings)

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8002"))
    reload = os.getenv("RELOAD", "false").lower() == "true"

    logger.info(f"Starting {settings.app_name} on {host}:{port}")

    uvicorn.run(
        "neo_permissions.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
