"""Historical search terms used as suggestion candidates and trending list."""

import structlog
from sqlalchemy.exc import SQLAlchemyError

from campushub.observability.metrics import record_vocabulary_sample_failure
from campushub.search.protocol import QueryLogStore
from campushub.search.types import VocabularyTerm
from campushub.utils.exceptions import StoreUnavailableError

logger = structlog.get_logger()

# Single-character queries are too short to be useful corrections
SUGGESTION_MIN_LENGTH = 2
TRENDING_MIN_LENGTH = 1


class VocabularySampler:
    """Reads the most frequent historical queries from the query log.

    Both reads degrade to an empty list when the log cannot be queried: a
    missing vocabulary only means no suggestion or no trending terms.
    """

    def __init__(self, query_log: QueryLogStore) -> None:
        self._query_log = query_log

    async def sample(self, limit: int) -> list[VocabularyTerm]:
        """Top ``limit`` distinct queries longer than one character.

        Args:
            limit: Vocabulary size

        Returns:
            Terms ordered by frequency descending, then term ascending
        """
        return await self._top(limit, SUGGESTION_MIN_LENGTH, purpose="suggestion")

    async def trending(self, limit: int = 5) -> list[VocabularyTerm]:
        """Top ``limit`` non-empty queries, for the trending searches list."""
        return await self._top(limit, TRENDING_MIN_LENGTH, purpose="trending")

    async def _top(self, limit: int, min_length: int, *, purpose: str) -> list[VocabularyTerm]:
        if limit < 1:
            return []
        try:
            rows = await self._query_log.aggregate_top(limit, min_length=min_length)
        except (StoreUnavailableError, SQLAlchemyError, OSError) as e:
            logger.warning("vocabulary_sample_failed", purpose=purpose, error=str(e))
            record_vocabulary_sample_failure(purpose)
            return []

        terms = [VocabularyTerm(term, int(count)) for term, count in rows]
        # Stores are not required to break frequency ties
        terms.sort(key=lambda t: (-t.frequency, t.term))
        return terms[:limit]
