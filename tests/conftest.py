"""Pytest fixtures for CampusHub search tests."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
import pytest_asyncio
import structlog
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from campushub.config.settings import SearchConfig, Settings
from campushub.db.models.base import Base
from campushub.search.orchestrator import SearchOrchestrator
from campushub.search.ranker import HybridRanker
from campushub.search.stores import InMemoryDocumentStore, InMemoryQueryLogStore, StoredDocument
from campushub.search.vocabulary import VocabularySampler

# =============================================================================
# Structlog Configuration Fixture
# =============================================================================


@pytest.fixture(scope="function", autouse=True)
def reset_structlog_after_test():
    """Reset structlog configuration after each test.

    This ensures tests that modify structlog global state
    don't affect other tests.
    """
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


# =============================================================================
# Database fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """File-backed SQLite engine with the CampusHub tables created.

    Each session gets its own connection, so concurrent query-log writes
    behave as they do against a pooled PostgreSQL engine.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'campushub.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# =============================================================================
# Search fixtures
# =============================================================================


@pytest.fixture
def search_config() -> SearchConfig:
    return SearchConfig()


@pytest.fixture
def sample_documents() -> list[StoredDocument]:
    """A handful of shared resources across two courses."""
    created = datetime(2025, 3, 1, tzinfo=UTC)
    return [
        StoredDocument(
            id=1,
            title="Database Systems final review",
            body="Normalization, transactions and indexing. Database recovery uses the log.",
            view_count=120,
            download_count=40,
            created_at=created,
            course_name="Database Systems",
            course_teacher="Prof. Wang",
            author_name="alice",
            resource_url="https://pan.example.com/s/db-review",
        ),
        StoredDocument(
            id=2,
            title="Linear algebra cheat sheet",
            body="Eigenvalues, eigenvectors and matrix decompositions on one page.",
            view_count=300,
            download_count=95,
            created_at=created,
            course_name="Linear Algebra",
            course_teacher="Prof. Li",
            author_name="bob",
            resource_url="https://pan.example.com/s/la-sheet",
        ),
        StoredDocument(
            id=3,
            title="数据库原理 期末复习",
            body="数据库原理课程的期末复习资料，包括关系代数和范式。",
            view_count=80,
            download_count=12,
            created_at=created,
            course_name="数据库原理",
            course_teacher="张老师",
            author_name="carol",
        ),
    ]


@pytest.fixture
def document_store(sample_documents, search_config) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(sample_documents, search_config)


@pytest.fixture
def query_log() -> InMemoryQueryLogStore:
    return InMemoryQueryLogStore()


@pytest.fixture
def orchestrator(document_store, query_log, search_config) -> SearchOrchestrator:
    """Orchestrator over the in-memory stores."""
    return SearchOrchestrator(
        ranker=HybridRanker(document_store, default_limit=search_config.result_limit),
        sampler=VocabularySampler(query_log),
        query_log=query_log,
        config=search_config,
    )


# =============================================================================
# API test fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create settings for API testing."""
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        ENVIRONMENT="test",
        DEBUG=True,
        log_level="DEBUG",
    )


@pytest.fixture
def test_app(
    test_settings: Settings,
    orchestrator: SearchOrchestrator,
    session_factory: async_sessionmaker[AsyncSession],
) -> FastAPI:
    """Create a FastAPI test application.

    Uses the in-memory search stores and the SQLite test database.
    """
    from campushub.api.app import create_app
    from campushub.db.config import get_db

    app = create_app(settings=test_settings, orchestrator=orchestrator)

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    return app


@pytest_asyncio.fixture
async def test_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for API testing.

    Provides an httpx.AsyncClient configured to call the test application
    directly without network overhead.
    """
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client
