"""Value types passed between search components."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import NamedTuple


class VocabularyTerm(NamedTuple):
    """A historical query text and how often it was searched."""

    term: str
    frequency: int


@dataclass(frozen=True)
class QueryEvent:
    """A single search submission, as appended to the query log."""

    query_text: str
    actor_ref: int | None = None
    source_addr: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class DocumentMatch:
    """Raw row returned by a document store before scoring.

    Attributes:
        text_match: Whether the full-text predicate matched (as opposed to
            only the substring predicate)
        relevance_score: Store-native text relevance; 0.0 when text_match is False
        headline: Excerpt with matched words wrapped in <mark> tags, present
            only for text matches
        body_excerpt_source: Leading part of the body, used for substring snippets
    """

    id: int
    title: str
    body_excerpt_source: str
    view_count: int = 0
    download_count: int = 0
    created_at: datetime | None = None
    course_name: str | None = None
    course_teacher: str | None = None
    author_name: str | None = None
    resource_url: str | None = None
    text_match: bool = False
    relevance_score: float = 0.0
    headline: str | None = None


@dataclass
class SearchResult:
    """A ranked, display-ready search hit."""

    document_id: int
    title: str
    snippet: str
    rank_score: float
    course_name: str | None = None
    author_name: str | None = None
    course_teacher: str | None = None
    view_count: int = 0
    download_count: int = 0
    resource_url: str | None = None
    created_at: datetime | None = None


@dataclass
class SearchResponse:
    """Outcome of one search request.

    ``error`` carries a user-facing message when the document store could
    not be queried; results are then empty and no suggestion is offered.
    """

    query: str
    results: list[SearchResult] = field(default_factory=list)
    suggestion: str | None = None
    error: str | None = None

    @property
    def total(self) -> int:
        return len(self.results)
