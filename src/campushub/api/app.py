"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from campushub.api.middleware import (
    ErrorHandlingMiddleware,
    RequestContextMiddleware,
    RequestLoggingMiddleware,
)
from campushub.api.routers import health_router, v1_router
from campushub.api.routers.health import APP_VERSION
from campushub.config.settings import Settings, get_settings
from campushub.config.validation import get_configuration_summary, validate_or_raise
from campushub.core.logging import setup_logging
from campushub.db.config import close_db, get_session_factory, init_db
from campushub.observability import get_metrics_manager
from campushub.search.orchestrator import SearchOrchestrator, create_search_orchestrator

logger = structlog.get_logger("campushub.api")


def create_app(
    settings: Settings | None = None,
    orchestrator: SearchOrchestrator | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)
        orchestrator: Optional search orchestrator (default: database-backed)

    Returns:
        Configured FastAPI application

    Example:
        # Testing
        app = create_app(settings=test_settings, orchestrator=in_memory_orchestrator)

        # Run with uvicorn
        uvicorn campushub.api.app:create_app --factory
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="CampusHub Search API",
        description="Search and query suggestions for shared campus resources",
        version=APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=_lifespan,
    )

    # Store settings on app state for access in dependencies
    app.state.settings = settings
    app.state.search_orchestrator = orchestrator or create_search_orchestrator(
        get_session_factory(settings), settings
    )

    _configure_middleware(app, settings)
    _configure_routers(app)

    return app


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.

    Args:
        app: FastAPI application

    Yields:
        None (context for application lifetime)
    """
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    validate_or_raise(settings)
    logger.info("starting_api", **get_configuration_summary(settings))

    get_metrics_manager().initialize(
        service_version=APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    # Search still answers (with a soft error) while the database is down
    try:
        await init_db()
        logger.info("database_pool_initialized")
    except (SQLAlchemyError, OSError) as e:
        logger.warning("database_initialization_skipped", error=str(e))

    yield

    logger.info("shutting_down_api")

    orchestrator: SearchOrchestrator = app.state.search_orchestrator
    if orchestrator.pending_log_writes:
        logger.info("draining_search_log_writes", pending=orchestrator.pending_log_writes)
    await orchestrator.drain()

    await close_db()
    logger.info("database_connections_closed")


def _configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure middleware stack.

    Middleware order (outermost to innermost execution):
    1. RequestLoggingMiddleware - Logs requests, records HTTP metrics
    2. ErrorHandlingMiddleware - Converts exceptions to HTTP responses
    3. CORSMiddleware - Handles CORS (if configured)
    4. RequestContextMiddleware - Assigns the request ID

    Note: Middleware is added in reverse order because Starlette
    processes them from last-added to first-added.

    Args:
        app: FastAPI application
        settings: Application settings
    """
    # Innermost: request context
    app.add_middleware(RequestContextMiddleware)

    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    # Error handling (catches exceptions from all inner middleware)
    app.add_middleware(ErrorHandlingMiddleware)

    # Outermost: request logging
    app.add_middleware(RequestLoggingMiddleware)


def _configure_routers(app: FastAPI) -> None:
    """Configure API routers.

    Args:
        app: FastAPI application
    """
    app.include_router(health_router)
    app.include_router(v1_router)
