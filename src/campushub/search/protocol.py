"""Store interfaces consumed by the search core.

The document store and the query log are owned outside this package. Any
object implementing these protocols can back the search orchestrator.
"""

from typing import Protocol, runtime_checkable

from campushub.search.types import DocumentMatch


@runtime_checkable
class DocumentStore(Protocol):
    """Text-search-capable store of documents."""

    async def search(self, query: str, limit: int) -> list[DocumentMatch]:
        """Return documents matching ``query`` by full text or substring.

        Rows should already be ordered by score, view count and id, and
        capped at ``limit``.

        Raises:
            StoreUnavailableError: If the store cannot be queried
        """
        ...


@runtime_checkable
class QueryLogStore(Protocol):
    """Append-only log of search events."""

    async def append(
        self,
        query_text: str,
        actor_ref: int | None = None,
        source_addr: str | None = None,
    ) -> None:
        """Record one search event.

        Raises:
            LogWriteError: If the event could not be written
        """
        ...

    async def aggregate_top(self, limit: int, min_length: int = 2) -> list[tuple[str, int]]:
        """Most frequent search texts of at least ``min_length`` characters.

        Returns:
            (query_text, count) pairs, count descending then text ascending

        Raises:
            StoreUnavailableError: If the log cannot be queried
        """
        ...
