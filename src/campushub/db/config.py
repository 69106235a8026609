"""Database configuration and session management.

The engine and its connection pool are process-wide and owned by this
module. Search components never create connections themselves; they are
handed the session factory returned by ``get_session_factory()``.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from campushub.config.settings import Settings, get_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(settings: Settings) -> dict[str, Any]:
    """Build create_async_engine keyword arguments for the configured backend."""
    options: dict[str, Any] = {"echo": settings.DEBUG}

    if settings.ENVIRONMENT == "test":
        options["poolclass"] = NullPool
    elif settings.is_postgres:
        options.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_pre_ping=True,
        )

    if settings.DATABASE_URL.startswith("postgresql+asyncpg"):
        options["connect_args"] = {
            "timeout": settings.DATABASE_CONNECT_TIMEOUT,
            "server_settings": {"search_path": settings.DATABASE_SCHEMA},
        }

    return options


def create_engine(settings: Settings) -> AsyncEngine:
    """Create a new async engine for the given settings."""
    return create_async_engine(settings.DATABASE_URL, **_engine_options(settings))


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    """Get the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = create_engine(settings or get_settings())
    return _engine


def get_session_factory(settings: Settings | None = None) -> async_sessionmaker[AsyncSession]:
    """Get the process-wide session factory bound to the shared engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(settings),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def init_db() -> None:
    """Initialize the database connection pool.

    Called during application startup to ensure the connection pool
    is ready before accepting requests.
    """
    async with get_engine().begin() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    """Close database connections gracefully.

    Called during application shutdown to release all connections
    in the pool.
    """
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI to inject database sessions.

    Usage:
        @router.get("/health/db")
        async def health_db(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_session_factory()() as session:
        yield session
