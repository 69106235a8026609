"""Search request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from campushub.search.types import SearchResponse, SearchResult, VocabularyTerm


class SearchResultItem(BaseModel):
    """One ranked search hit."""

    document_id: int
    title: str
    snippet: str = Field(..., description="Excerpt; matched words wrapped in <mark> tags")
    rank_score: float
    course_name: str | None = None
    course_teacher: str | None = None
    author_name: str | None = None
    view_count: int = 0
    download_count: int = 0
    resource_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResultItem":
        return cls(
            document_id=result.document_id,
            title=result.title,
            snippet=result.snippet,
            rank_score=result.rank_score,
            course_name=result.course_name,
            course_teacher=result.course_teacher,
            author_name=result.author_name,
            view_count=result.view_count,
            download_count=result.download_count,
            resource_url=result.resource_url,
            created_at=result.created_at,
        )


class SearchResponseBody(BaseModel):
    """Search response.

    ``suggestion`` is only set when there are no results. ``error`` is only
    set when the search store was unavailable.
    """

    query: str
    results: list[SearchResultItem] = Field(default_factory=list)
    total: int = 0
    suggestion: str | None = Field(default=None, description="Did-you-mean correction")
    error: str | None = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "query": "linaer algebra",
                "results": [],
                "total": 0,
                "suggestion": "linear algebra",
                "error": None,
            }
        }
    }

    @classmethod
    def from_response(cls, response: SearchResponse) -> "SearchResponseBody":
        return cls(
            query=response.query,
            results=[SearchResultItem.from_result(r) for r in response.results],
            total=response.total,
            suggestion=response.suggestion,
            error=response.error,
        )


class TrendingTerm(BaseModel):
    """A frequently searched term."""

    term: str
    frequency: int

    @classmethod
    def from_term(cls, term: VocabularyTerm) -> "TrendingTerm":
        return cls(term=term.term, frequency=term.frequency)


class TrendingResponse(BaseModel):
    """Trending searches."""

    terms: list[TrendingTerm] = Field(default_factory=list)
