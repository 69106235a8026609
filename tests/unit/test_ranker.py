"""Unit tests for the hybrid ranker."""

import pytest
from sqlalchemy.exc import OperationalError

from campushub.search.ranker import (
    ELLIPSIS,
    SUBSTRING_SCORE,
    TEXT_MATCH_OFFSET,
    HybridRanker,
    build_snippet,
    compute_rank_score,
)
from campushub.search.types import DocumentMatch
from campushub.utils.exceptions import SearchUnavailable, StoreUnavailableError


class StaticDocumentStore:
    """Document store returning fixed matches in the given order."""

    def __init__(self, matches: list[DocumentMatch]):
        self.matches = matches
        self.calls: list[tuple[str, int]] = []

    async def search(self, query: str, limit: int) -> list[DocumentMatch]:
        self.calls.append((query, limit))
        return list(self.matches)


class BrokenDocumentStore:
    def __init__(self, exc: Exception):
        self.exc = exc

    async def search(self, query: str, limit: int) -> list[DocumentMatch]:
        raise self.exc


def text_match(doc_id: int, relevance: float, views: int = 0) -> DocumentMatch:
    return DocumentMatch(
        id=doc_id,
        title=f"doc {doc_id}",
        body_excerpt_source="body",
        view_count=views,
        text_match=True,
        relevance_score=relevance,
        headline="the <mark>query</mark> in context",
    )


def substring_match(doc_id: int, views: int = 0, body: str = "body text") -> DocumentMatch:
    return DocumentMatch(
        id=doc_id,
        title=f"doc {doc_id}",
        body_excerpt_source=body,
        view_count=views,
    )


class TestComputeRankScore:
    """Tests for compute_rank_score()."""

    def test_text_match_adds_offset(self):
        assert compute_rank_score(True, 0.3) == pytest.approx(1.3)

    def test_substring_only_is_fixed(self):
        assert compute_rank_score(False, 0.9) == SUBSTRING_SCORE

    def test_text_match_always_outranks_substring(self):
        assert compute_rank_score(True, 0.0) == TEXT_MATCH_OFFSET
        assert compute_rank_score(True, 0.0) > compute_rank_score(False, 0.0)


class TestBuildSnippet:
    """Tests for build_snippet()."""

    def test_text_match_uses_headline(self):
        match = text_match(1, 0.2)

        assert build_snippet(match) == "the <mark>query</mark> in context"

    def test_substring_match_truncates_body(self):
        match = substring_match(1, body="x" * 200)

        snippet = build_snippet(match)
        assert snippet == "x" * 120 + ELLIPSIS

    def test_short_body_still_gets_ellipsis(self):
        assert build_snippet(substring_match(1, body="short")) == "short..."

    def test_custom_length(self):
        assert build_snippet(substring_match(1, body="abcdef"), snippet_chars=3) == "abc..."


@pytest.mark.asyncio
class TestHybridRanker:
    """Tests for HybridRanker.rank()."""

    async def test_text_match_ranks_above_substring(self):
        store = StaticDocumentStore([substring_match(1, views=1000), text_match(2, 0.3)])

        results = await HybridRanker(store).rank("query")

        assert [r.document_id for r in results] == [2, 1]
        assert results[0].rank_score == pytest.approx(1.3)
        assert results[1].rank_score == pytest.approx(0.5)

    async def test_ties_break_by_view_count(self):
        store = StaticDocumentStore([substring_match(1, views=10), substring_match(2, views=50)])

        results = await HybridRanker(store).rank("query")

        assert [r.document_id for r in results] == [2, 1]

    async def test_full_ties_break_by_id(self):
        store = StaticDocumentStore([substring_match(9, views=5), substring_match(4, views=5)])

        results = await HybridRanker(store).rank("query")

        assert [r.document_id for r in results] == [4, 9]

    async def test_scores_non_increasing(self):
        store = StaticDocumentStore(
            [text_match(1, 0.1), substring_match(2), text_match(3, 0.7), text_match(4, 0.4)]
        )

        results = await HybridRanker(store).rank("query")

        scores = [r.rank_score for r in results]
        assert scores == sorted(scores, reverse=True)

    async def test_caps_at_limit(self):
        store = StaticDocumentStore([substring_match(i) for i in range(1, 31)])

        results = await HybridRanker(store).rank("query", limit=20)

        assert len(results) == 20

    async def test_default_limit_passed_to_store(self):
        store = StaticDocumentStore([])

        await HybridRanker(store, default_limit=7).rank("query")

        assert store.calls == [("query", 7)]

    async def test_limit_below_one_rejected(self):
        with pytest.raises(ValueError):
            await HybridRanker(StaticDocumentStore([])).rank("query", limit=0)

    async def test_no_matches(self):
        assert await HybridRanker(StaticDocumentStore([])).rank("query") == []

    async def test_carries_document_fields(self):
        match = text_match(3, 0.5, views=42)
        match.course_name = "Operating Systems"
        match.author_name = "dave"
        match.resource_url = "https://pan.example.com/s/os"

        [result] = await HybridRanker(StaticDocumentStore([match])).rank("query")

        assert result.course_name == "Operating Systems"
        assert result.author_name == "dave"
        assert result.view_count == 42
        assert result.resource_url == "https://pan.example.com/s/os"

    async def test_store_unavailable_propagates(self):
        ranker = HybridRanker(BrokenDocumentStore(StoreUnavailableError("down")))

        with pytest.raises(SearchUnavailable):
            await ranker.rank("query")

    async def test_database_error_wrapped(self):
        exc = OperationalError("SELECT", {}, Exception("connection reset"))
        ranker = HybridRanker(BrokenDocumentStore(exc))

        with pytest.raises(StoreUnavailableError) as exc_info:
            await ranker.rank("query")

        assert exc_info.value.operation == "rank"
        assert exc_info.value.__cause__ is exc
