"""Search and query-suggestion engine."""

from campushub.search.distance import levenshtein
from campushub.search.orchestrator import SearchOrchestrator, create_search_orchestrator
from campushub.search.protocol import DocumentStore, QueryLogStore
from campushub.search.ranker import HybridRanker, build_snippet, compute_rank_score
from campushub.search.stores import (
    InMemoryDocumentStore,
    InMemoryQueryLogStore,
    PostgresDocumentStore,
    SqlQueryLogStore,
    StoredDocument,
)
from campushub.search.suggester import MAX_EDIT_DISTANCE, SpellingSuggester, suggest
from campushub.search.types import (
    DocumentMatch,
    QueryEvent,
    SearchResponse,
    SearchResult,
    VocabularyTerm,
)
from campushub.search.vocabulary import VocabularySampler

__all__ = [
    "DocumentMatch",
    "DocumentStore",
    "HybridRanker",
    "InMemoryDocumentStore",
    "InMemoryQueryLogStore",
    "MAX_EDIT_DISTANCE",
    "PostgresDocumentStore",
    "QueryEvent",
    "QueryLogStore",
    "SearchOrchestrator",
    "SearchResponse",
    "SearchResult",
    "SpellingSuggester",
    "SqlQueryLogStore",
    "StoredDocument",
    "VocabularySampler",
    "VocabularyTerm",
    "build_snippet",
    "compute_rank_score",
    "create_search_orchestrator",
    "levenshtein",
    "suggest",
]
