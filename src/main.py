"""Nego Agent API entrypoint."""

import uvicorn

from api.app import create_app
from config import get_settings

# Create application instance
application = create_app()


def run() -> None:
    """Serve the application with uvicorn using configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "main:application",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_reload,
        log_level=settings.app_log_level.lower(),
    )


if __name__ == "__main__":
    run()
