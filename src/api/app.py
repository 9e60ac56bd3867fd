"""FastAPI application builder with dependency injection and lifecycle management."""

import contextlib
import logging
import typing

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import APIStatusError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import dependencies
from config import Settings
from infrastructure.call_client import OutboundCallClient
from infrastructure.database import DatabaseManager
from infrastructure.models import Base, WarehouseBase
from infrastructure.openai_client import OpenAIClient
from infrastructure.persona_client import PersonaClient
from logic.common import VendorWarehouse
from logic.tools import ToolRegistry, build_default_registry
from repositories.vendor_repository import VendorRepository

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def include_routers(app: FastAPI) -> None:
    """Include all API routers.

    Args:
        app: FastAPI application instance
    """
    from api.routers.chat import router as chat_router
    from api.routers.health import router as health_router

    app.include_router(health_router)
    app.include_router(chat_router)


def describe_validation_error(exc: RequestValidationError) -> str:
    """Render request validation errors as one readable sentence."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location or 'body'}: {error.get('msg', 'invalid value')}")
    return "Invalid request. " + "; ".join(parts)


class AppBuilder:
    """Application builder with dependency injection and lifecycle management.

    This class follows the builder pattern and manages:
    - Application configuration
    - Capability clients (OpenAI, persona, outbound calls), built once
    - History and warehouse database lifecycle
    - Tool registry assembly
    - Dependency injection setup
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the application builder.

        Args:
            settings: Explicit settings; loaded from the environment when omitted
        """
        from config import get_settings

        self.settings = settings or get_settings()

        # Async resources (initialized in startup)
        self._history_db: DatabaseManager | None = None
        self._warehouse_db: DatabaseManager | None = None
        self._openai_client: OpenAIClient | None = None
        self._persona_client: PersonaClient | None = None
        self._call_client: OutboundCallClient | None = None
        self._tool_registry: ToolRegistry | None = None

        # Create FastAPI application
        self.app: FastAPI = FastAPI(
            title="Nego Agent API",
            description=(
                "Chat API that finds and contacts negotiation partners through "
                "OpenAI function calling"
            ),
            version="0.1.0",
            debug=self.settings.app_log_level == "DEBUG",
            lifespan=self.lifespan_manager,
            docs_url="/docs",
            redoc_url="/redoc",
            openapi_url="/openapi.json",
        )

        # Configure middleware
        self._configure_middleware()

        # Configure exception handlers
        self._configure_exception_handlers()

        # Override dependencies with actual instances
        self._setup_dependency_overrides()

        # Include routers
        include_routers(self.app)

        # Add root endpoint
        self._add_root_endpoint()

    def _configure_middleware(self) -> None:
        """Configure FastAPI middleware."""
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_allowed_origins,
            allow_origin_regex=self.settings.cors_allowed_origin_regex,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    def _configure_exception_handlers(self) -> None:
        """Configure global exception handlers.

        Every error body has the shape {"error": "..."}.
        """

        @self.app.exception_handler(RequestValidationError)
        async def validation_exception_handler(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            """Malformed requests are rejected before any side effect."""
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": describe_validation_error(exc)},
            )

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": str(exc.detail)},
                headers=getattr(exc, "headers", None),
            )

        @self.app.exception_handler(APIStatusError)
        async def provider_exception_handler(
            request: Request, exc: APIStatusError
        ) -> JSONResponse:
            logger.error(f"Provider error: {exc.status_code} {exc.message}")
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.message},
            )

        @self.app.exception_handler(Exception)
        async def global_exception_handler(
            request: Request, exc: Exception
        ) -> JSONResponse:
            """Global exception handler for unhandled errors."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Unexpected error"},
            )

    def _setup_dependency_overrides(self) -> None:
        """Set up dependency injection overrides."""
        overrides = self.app.dependency_overrides
        overrides[dependencies.get_settings] = self._get_settings
        overrides[dependencies.get_history_database] = self._get_history_db
        overrides[dependencies.get_openai_client] = self._get_openai_client
        overrides[dependencies.get_persona_client] = self._get_persona_client
        overrides[dependencies.get_tool_registry] = self._get_tool_registry

    def _add_root_endpoint(self) -> None:
        """Add root API endpoint."""

        @self.app.get("/", tags=["root"])
        async def root() -> dict[str, str]:
            """Root endpoint with API information."""
            return {
                "status": "ok",
                "name": "Nego Agent API",
                "version": "0.1.0",
                "docs": "/docs",
                "chat": "/v1/chat",
            }

    def _get_settings(self) -> Settings:
        return self.settings

    @staticmethod
    def _require(resource: typing.Any, name: str) -> typing.Any:
        if resource is None:
            raise RuntimeError(f"{name} not initialized")
        return resource

    def _get_history_db(self) -> DatabaseManager:
        return self._require(self._history_db, "History database")

    def _get_openai_client(self) -> OpenAIClient:
        return self._require(self._openai_client, "OpenAI client")

    def _get_persona_client(self) -> PersonaClient:
        return self._require(self._persona_client, "Persona client")

    def _get_tool_registry(self) -> ToolRegistry:
        return self._require(self._tool_registry, "Tool registry")

    async def init_async_resources(self) -> None:
        """Construct every capability client once for the process lifetime."""
        settings = self.settings
        logger.info("Starting Nego Agent API v0.1.0")
        logger.info(f"Log level: {settings.app_log_level}")
        logger.info(f"Model: {settings.openai_model}")

        echo = settings.app_log_level == "DEBUG"
        self._history_db = DatabaseManager(
            settings.database_url, Base.metadata, echo=echo
        )
        if settings.warehouse_database_url:
            self._warehouse_db = DatabaseManager(
                settings.warehouse_database_url, WarehouseBase.metadata, echo=echo
            )
        else:
            logger.warning("Warehouse not configured, vendor inserts are skipped")

        self._openai_client = OpenAIClient(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.openai_model,
            timeout=settings.openai_timeout,
            max_retries=settings.openai_max_retries,
        )

        self._persona_client = PersonaClient(
            base_url=settings.persona_api_url,
            api_key=settings.persona_api_key,
            timeout=settings.http_timeout,
        )

        self._call_client = OutboundCallClient(
            url=settings.outbound_call_url,
            api_key=settings.outbound_call_api_key,
            timeout=settings.http_timeout,
        )

        self._tool_registry = build_default_registry(
            VendorWarehouse(self._warehouse_db, VendorRepository()),
            self._call_client,
        )
        logger.info(f"Tools registered: {', '.join(self._tool_registry.names)}")

    async def tear_down(self) -> None:
        """Clean up async resources."""
        logger.info("Shutting down Nego Agent API")

        for client in (self._openai_client, self._persona_client, self._call_client):
            if client is not None:
                await client.close()

        for database in (self._history_db, self._warehouse_db):
            if database is not None:
                await database.close()

        logger.info("Cleanup completed")

    @contextlib.asynccontextmanager
    async def lifespan_manager(
        self, _: FastAPI
    ) -> typing.AsyncIterator[dict[str, typing.Any]]:
        """Lifespan context manager for FastAPI application.

        Args:
            _: FastAPI application instance (unused)

        Yields:
            dict: Lifespan state (empty dict)
        """
        try:
            await self.init_async_resources()
            yield {}
        finally:
            await self.tear_down()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    return AppBuilder().app
