"""Search orchestration: ranking, spelling fallback and query telemetry.

Usage:
    from campushub.db.config import get_session_factory
    from campushub.search.orchestrator import create_search_orchestrator

    orchestrator = create_search_orchestrator(get_session_factory())
    response = await orchestrator.search("linear algebra", actor_ref=42)
"""

import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campushub.config.settings import SearchConfig, Settings, get_settings
from campushub.observability.metrics import (
    SearchOutcome,
    observe_search,
    record_log_write_failure,
    record_suggestion,
)
from campushub.search.protocol import QueryLogStore
from campushub.search.ranker import HybridRanker
from campushub.search.stores import PostgresDocumentStore, SqlQueryLogStore
from campushub.search.suggester import SpellingSuggester
from campushub.search.types import QueryEvent, SearchResponse, VocabularyTerm
from campushub.search.vocabulary import VocabularySampler
from campushub.utils.exceptions import StoreUnavailableError

logger = structlog.get_logger()


class SearchOrchestrator:
    """Answers search requests and records them in the query log.

    A request never fails because of the query log: the log write runs as
    a background task after the response is built, and its errors are
    logged and counted only.
    """

    def __init__(
        self,
        ranker: HybridRanker,
        sampler: VocabularySampler,
        query_log: QueryLogStore,
        config: SearchConfig | None = None,
        suggester: SpellingSuggester | None = None,
    ) -> None:
        self.config = config or SearchConfig()
        self.ranker = ranker
        self.sampler = sampler
        self.query_log = query_log
        self.suggester = suggester or SpellingSuggester(
            sampler,
            vocabulary_size=self.config.vocabulary_size,
            max_distance=self.config.max_edit_distance,
        )
        # asyncio only keeps weak references to tasks
        self._log_tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_log_writes(self) -> int:
        """Number of query-log writes still in flight."""
        return len(self._log_tasks)

    async def search(
        self,
        raw_query: str | None,
        actor_ref: int | None = None,
        source_addr: str | None = None,
    ) -> SearchResponse:
        """Search documents for ``raw_query``.

        Args:
            raw_query: Query as submitted; surrounding whitespace is ignored
            actor_ref: Id of the signed-in user, if any
            source_addr: Client network address

        Returns:
            Ranked results; a suggestion when there are none; a soft error
            message when the document store is unavailable
        """
        query = (raw_query or "").strip()

        with observe_search() as metrics_ctx:
            if not query:
                metrics_ctx["outcome"] = SearchOutcome.EMPTY_QUERY
                return SearchResponse(query="")

            response = await self._execute(query, metrics_ctx)

        self._schedule_log_write(QueryEvent(query, actor_ref, source_addr))
        return response

    async def _execute(self, query: str, metrics_ctx: dict) -> SearchResponse:
        try:
            results = await self.ranker.rank(query, self.config.result_limit)
        except StoreUnavailableError as e:
            logger.warning("search_unavailable", query=query, error=str(e))
            metrics_ctx["outcome"] = SearchOutcome.UNAVAILABLE
            return SearchResponse(query=query, error=self.config.unavailable_message)

        metrics_ctx["result_count"] = len(results)
        if results:
            metrics_ctx["outcome"] = SearchOutcome.HIT
            logger.info("search_completed", query=query, total=len(results))
            return SearchResponse(query=query, results=results)

        metrics_ctx["outcome"] = SearchOutcome.MISS
        suggestion = await self.suggester.suggest_for(query)
        if suggestion is not None:
            record_suggestion()
        logger.info("search_no_results", query=query, suggestion=suggestion)
        return SearchResponse(query=query, suggestion=suggestion)

    def _schedule_log_write(self, event: QueryEvent) -> None:
        task = asyncio.create_task(self._write_log(event))
        self._log_tasks.add(task)
        task.add_done_callback(self._log_tasks.discard)

    async def _write_log(self, event: QueryEvent) -> None:
        try:
            await self.query_log.append(event.query_text, event.actor_ref, event.source_addr)
        except Exception as e:
            logger.warning(
                "search_log_write_failed",
                query=event.query_text,
                error=str(e),
                error_type=type(e).__name__,
            )
            record_log_write_failure()

    async def drain(self) -> None:
        """Wait until every scheduled log write has finished."""
        while self._log_tasks:
            await asyncio.gather(*list(self._log_tasks), return_exceptions=True)

    async def trending(self, limit: int | None = None) -> list[VocabularyTerm]:
        """Most frequent historical searches (empty if the log is unavailable)."""
        return await self.sampler.trending(limit or self.config.trending_limit)


def create_search_orchestrator(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings | None = None,
) -> SearchOrchestrator:
    """Create an orchestrator backed by the CampusHub database.

    Args:
        session_factory: Factory from ``campushub.db.config.get_session_factory``
        settings: Application settings (default: global settings)

    Returns:
        Configured SearchOrchestrator
    """
    config = (settings or get_settings()).search
    query_log = SqlQueryLogStore(session_factory)
    ranker = HybridRanker(
        PostgresDocumentStore(session_factory, config),
        default_limit=config.result_limit,
        snippet_chars=config.snippet_chars,
    )
    return SearchOrchestrator(
        ranker=ranker,
        sampler=VocabularySampler(query_log),
        query_log=query_log,
        config=config,
    )
