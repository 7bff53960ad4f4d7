"""FastAPI application factory and configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from dependency_injector import providers
from fastapi import FastAPI

from storefront.container import Container
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.logging.config import configure_logging, get_logger
from storefront.infrastructure.telemetry import configure_opentelemetry, instrument_fastapi
from storefront.presentation.api.middleware.cors import setup_cors
from storefront.presentation.api.middleware.error_handling import setup_exception_handlers
from storefront.presentation.api.middleware.logging import LoggingMiddleware
from storefront.presentation.api.middleware.rate_limiting import setup_rate_limiting
from storefront.presentation.api.middleware.request_context import RequestContextMiddleware
from storefront.presentation.api.v1 import api_router


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan events."""
    container: Container = app.state.container
    settings: Settings = container.config()
    database = container.database()

    logger.info("application_startup", app_name=app.title, version=app.version)
    if settings.database_auto_create:
        await database.create_all()

    yield

    await database.close()
    logger.info("application_shutdown")


TAGS_METADATA = [
    {"name": "health", "description": "Liveness and database connectivity."},
    {
        "name": "auth",
        "description": "Registration and login. Both return a bearer token for the "
        "`Authorization: Bearer <token>` header.",
    },
    {
        "name": "products",
        "description": """
Public catalog and seller inventory.

- Anyone can browse active listings and fetch a single product
- Sellers create listings and manage only their own
- Status follows stock: zero stock means `out_of_stock`
        """,
    },
]


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Overrides environment-derived settings (used by tests)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    configure_opentelemetry(settings)
    configure_logging(settings)

    # Instantiation wires the endpoint and dependency modules
    container = Container()
    container.config.override(providers.Object(settings))

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Storefront REST API: accounts, product catalog and seller inventory.",
        openapi_tags=TAGS_METADATA,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        lifespan=lifespan,
    )
    app.state.container = container

    if settings.otel_enabled:
        instrument_fastapi(app)

    setup_exception_handlers(app, settings)

    # Last added runs first: request context, CORS, logging, rate limiting
    setup_rate_limiting(app, settings)
    app.add_middleware(LoggingMiddleware)
    setup_cors(app, settings)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app
