"""API routers package."""

from api.routers.chat import router as chat_router
from api.routers.health import router as health_router

__all__ = ["chat_router", "health_router"]
