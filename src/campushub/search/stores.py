"""Document store and query log implementations.

``PostgresDocumentStore`` and ``SqlQueryLogStore`` run against the shared
CampusHub database through an injected session factory. The in-memory
variants back local development and tests.
"""

import re
import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campushub.config.settings import SearchConfig
from campushub.core.logging import log_database_query
from campushub.db.models.action_log import ActionType
from campushub.db.repositories.action_log import ActionLogRepository
from campushub.db.repositories.resource import ResourceRepository
from campushub.search.ranker import SUBSTRING_SCORE, TEXT_MATCH_OFFSET, compute_rank_score
from campushub.search.types import DocumentMatch, QueryEvent
from campushub.utils.exceptions import LogWriteError, StoreUnavailableError

logger = structlog.get_logger()

_WORD = re.compile(r"\w+")


def _tokens(text: str) -> list[str]:
    return _WORD.findall(text.lower())


class PostgresDocumentStore:
    """Hybrid full-text and substring search over the ``resources`` table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        config: SearchConfig | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._config = config or SearchConfig()

    async def search(self, query: str, limit: int) -> list[DocumentMatch]:
        """Run the combined search statement.

        Raises:
            StoreUnavailableError: If the database cannot be queried
        """
        start = time.perf_counter()
        try:
            async with self._session_factory() as session:
                rows = await ResourceRepository(session).search_hybrid(
                    query,
                    limit=limit,
                    text_match_offset=TEXT_MATCH_OFFSET,
                    substring_score=SUBSTRING_SCORE,
                    text_search_config=self._config.text_search_config,
                    excerpt_chars=self._config.snippet_chars,
                    headline_min_words=self._config.headline_min_words,
                    headline_max_words=self._config.headline_max_words,
                )
        except (SQLAlchemyError, OSError) as e:
            logger.error("document_search_failed", query=query, error=str(e))
            raise StoreUnavailableError(str(e), operation="search") from e

        log_database_query(
            logger,
            "hybrid_search",
            "resources",
            (time.perf_counter() - start) * 1000,
            rows=len(rows),
        )

        return [
            DocumentMatch(
                id=row["id"],
                title=row["title"],
                body_excerpt_source=row["body_excerpt_source"] or "",
                view_count=row["view_count"] or 0,
                download_count=row["download_count"] or 0,
                created_at=row["created_at"],
                course_name=row["course_name"],
                course_teacher=row["course_teacher"],
                author_name=row["author_name"],
                resource_url=row["resource_url"],
                text_match=bool(row["text_match"]),
                relevance_score=float(row["relevance_score"] or 0.0),
                headline=row["headline"],
            )
            for row in rows
        ]


class SqlQueryLogStore:
    """Query log backed by the ``action_logs`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append(
        self,
        query_text: str,
        actor_ref: int | None = None,
        source_addr: str | None = None,
    ) -> None:
        """Insert one SEARCH event in its own session.

        Raises:
            LogWriteError: If the insert fails
        """
        try:
            async with self._session_factory() as session:
                await ActionLogRepository(session).log_search(
                    query_text, user_id=actor_ref, ip_addr=source_addr
                )
        except (SQLAlchemyError, OSError) as e:
            raise LogWriteError(f"Failed to record search event: {e}") from e

    async def aggregate_top(self, limit: int, min_length: int = 2) -> list[tuple[str, int]]:
        """Most frequent SEARCH payloads.

        Raises:
            StoreUnavailableError: If the log cannot be queried
        """
        try:
            async with self._session_factory() as session:
                return await ActionLogRepository(session).top_payloads(
                    ActionType.SEARCH, limit=limit, min_length=min_length
                )
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailableError(str(e), operation="aggregate_top") from e


@dataclass
class StoredDocument:
    """A document held by ``InMemoryDocumentStore``."""

    id: int
    title: str
    body: str = ""
    view_count: int = 0
    download_count: int = 0
    created_at: datetime | None = None
    course_name: str | None = None
    course_teacher: str | None = None
    author_name: str | None = None
    resource_url: str | None = None


class InMemoryDocumentStore:
    """Document store over a list of documents, for development and tests.

    Full-text search is approximated with lower-cased word tokens: a
    document text-matches when every query token occurs in its title or
    body. Relevance grows with the number of occurrences and stays below 1.
    """

    def __init__(
        self,
        documents: list[StoredDocument] | None = None,
        config: SearchConfig | None = None,
    ) -> None:
        self.documents: list[StoredDocument] = list(documents or [])
        self._config = config or SearchConfig()

    def add(self, document: StoredDocument) -> None:
        self.documents.append(document)

    async def search(self, query: str, limit: int) -> list[DocumentMatch]:
        query_tokens = set(_tokens(query))
        needle = query.casefold()
        matches = []

        for doc in self.documents:
            words = _tokens(f"{doc.title} {doc.body}")
            text_match = bool(query_tokens) and query_tokens.issubset(words)
            substring_match = needle in doc.title.casefold() or needle in doc.body.casefold()
            if not (text_match or substring_match):
                continue

            relevance = 0.0
            headline = None
            if text_match:
                hits = sum(1 for w in words if w in query_tokens)
                relevance = hits / (hits + 1)
                headline = self._headline(doc.body, query_tokens)

            matches.append(
                DocumentMatch(
                    id=doc.id,
                    title=doc.title,
                    body_excerpt_source=doc.body[: self._config.snippet_chars],
                    view_count=doc.view_count,
                    download_count=doc.download_count,
                    created_at=doc.created_at,
                    course_name=doc.course_name,
                    course_teacher=doc.course_teacher,
                    author_name=doc.author_name,
                    resource_url=doc.resource_url,
                    text_match=text_match,
                    relevance_score=relevance,
                    headline=headline,
                )
            )

        matches.sort(
            key=lambda m: (
                -compute_rank_score(m.text_match, m.relevance_score),
                -m.view_count,
                m.id,
            )
        )
        return matches[:limit]

    def _headline(self, body: str, query_tokens: set[str]) -> str:
        """Window of body words around the first hit, hits wrapped in <mark>."""
        words = body.split()
        first_hit = next(
            (i for i, w in enumerate(words) if query_tokens.intersection(_tokens(w))),
            0,
        )
        lead = max(0, self._config.headline_min_words // 3)
        start = max(0, first_hit - lead)
        window = words[start : start + self._config.headline_max_words]
        return " ".join(
            f"<mark>{w}</mark>" if query_tokens.intersection(_tokens(w)) else w for w in window
        )


class InMemoryQueryLogStore:
    """Query log kept in a list, for development and tests."""

    def __init__(self) -> None:
        self.events: list[QueryEvent] = []

    async def append(
        self,
        query_text: str,
        actor_ref: int | None = None,
        source_addr: str | None = None,
    ) -> None:
        self.events.append(QueryEvent(query_text, actor_ref, source_addr))

    async def aggregate_top(self, limit: int, min_length: int = 2) -> list[tuple[str, int]]:
        counts = Counter(
            e.query_text for e in self.events if e.query_text and len(e.query_text) >= min_length
        )
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:limit]
