"""Spelling suggestions drawn from the historical query vocabulary.

A candidate term ``t`` is accepted for query ``q`` when, with
``d = levenshtein(q, t)``::

    d <= MAX_EDIT_DISTANCE and d < max(len(q), len(t)) / 2 + 1

The closest accepted term wins; on equal distance the earlier term in
vocabulary order (the more frequent one) wins.
"""

from collections.abc import Iterable

import structlog

from campushub.search.distance import levenshtein
from campushub.search.types import VocabularyTerm
from campushub.search.vocabulary import VocabularySampler

logger = structlog.get_logger()

MAX_EDIT_DISTANCE = 2


def is_acceptable(
    distance: int, query: str, term: str, max_distance: int = MAX_EDIT_DISTANCE
) -> bool:
    """Whether a term at ``distance`` from ``query`` is close enough to suggest."""
    return distance <= max_distance and distance < max(len(query), len(term)) / 2 + 1


def suggest(
    query: str,
    vocabulary: Iterable[VocabularyTerm | str],
    max_distance: int = MAX_EDIT_DISTANCE,
) -> str | None:
    """Closest acceptable vocabulary term to ``query``.

    Args:
        query: Trimmed query that produced no results
        vocabulary: Candidate terms in priority order
        max_distance: Absolute edit distance cap

    Returns:
        The suggested term, or None when nothing qualifies
    """
    best_term: str | None = None
    best_distance: int | None = None

    for entry in vocabulary:
        term = entry.term if isinstance(entry, VocabularyTerm) else entry
        if term == query:
            continue
        distance = levenshtein(query, term)
        if not is_acceptable(distance, query, term, max_distance):
            continue
        if best_distance is None or distance < best_distance:
            best_term = term
            best_distance = distance

    return best_term


class SpellingSuggester:
    """Samples the vocabulary and picks a correction for a zero-result query."""

    def __init__(
        self,
        sampler: VocabularySampler,
        vocabulary_size: int = 50,
        max_distance: int = MAX_EDIT_DISTANCE,
    ) -> None:
        self.sampler = sampler
        self.vocabulary_size = vocabulary_size
        self.max_distance = max_distance

    async def suggest_for(self, query: str) -> str | None:
        """Sample the vocabulary once and return the best suggestion."""
        vocabulary = await self.sampler.sample(self.vocabulary_size)
        suggestion = suggest(query, vocabulary, self.max_distance)
        logger.debug(
            "suggestion_computed",
            query=query,
            vocabulary_size=len(vocabulary),
            suggestion=suggestion,
        )
        return suggestion
