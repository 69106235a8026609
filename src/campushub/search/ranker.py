"""Hybrid ranking of full-text and substring matches."""

import structlog
from sqlalchemy.exc import SQLAlchemyError

from campushub.search.protocol import DocumentStore
from campushub.search.types import DocumentMatch, SearchResult
from campushub.utils.exceptions import StoreUnavailableError

logger = structlog.get_logger()

# Full-text matches always outrank substring-only matches:
# ts_rank is in [0, 1], so text scores are >= 1.0 > 0.5.
TEXT_MATCH_OFFSET = 1.0
SUBSTRING_SCORE = 0.5
ELLIPSIS = "..."
DEFAULT_LIMIT = 20
DEFAULT_SNIPPET_CHARS = 120


def compute_rank_score(text_match: bool, relevance: float) -> float:
    """Score used to order search results."""
    if text_match:
        return relevance + TEXT_MATCH_OFFSET
    return SUBSTRING_SCORE


def build_snippet(match: DocumentMatch, snippet_chars: int = DEFAULT_SNIPPET_CHARS) -> str:
    """Display excerpt for a match.

    Full-text matches use the store's highlighted headline; substring-only
    matches use the first ``snippet_chars`` characters of the body.
    """
    if match.text_match and match.headline is not None:
        return match.headline
    return match.body_excerpt_source[:snippet_chars] + ELLIPSIS


def sort_key(result: SearchResult) -> tuple[float, int, int]:
    return (-result.rank_score, -result.view_count, result.document_id)


class HybridRanker:
    """Turns document store matches into ordered search results."""

    def __init__(
        self,
        store: DocumentStore,
        default_limit: int = DEFAULT_LIMIT,
        snippet_chars: int = DEFAULT_SNIPPET_CHARS,
    ) -> None:
        self.store = store
        self.default_limit = default_limit
        self.snippet_chars = snippet_chars

    async def rank(self, query: str, limit: int | None = None) -> list[SearchResult]:
        """Rank documents matching ``query``.

        Args:
            query: Trimmed, non-empty query
            limit: Maximum results (default: the configured result limit)

        Returns:
            Results ordered by score, then view count, then document id

        Raises:
            ValueError: If limit is less than 1
            StoreUnavailableError: If the document store cannot be queried
        """
        if limit is None:
            limit = self.default_limit
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        try:
            matches = await self.store.search(query, limit)
        except StoreUnavailableError:
            raise
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailableError(str(e), operation="rank") from e

        results = [self._to_result(m) for m in matches]
        results.sort(key=sort_key)
        logger.debug("documents_ranked", query=query, matches=len(matches), limit=limit)
        return results[:limit]

    def _to_result(self, match: DocumentMatch) -> SearchResult:
        return SearchResult(
            document_id=match.id,
            title=match.title,
            snippet=build_snippet(match, self.snippet_chars),
            rank_score=compute_rank_score(match.text_match, match.relevance_score),
            course_name=match.course_name,
            author_name=match.author_name,
            course_teacher=match.course_teacher,
            view_count=match.view_count,
            download_count=match.download_count,
            resource_url=match.resource_url,
            created_at=match.created_at,
        )
