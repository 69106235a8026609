"""Custom exceptions for CampusHub."""


class CampusHubError(Exception):
    """Base exception for all CampusHub errors."""

    pass


class SearchError(CampusHubError):
    """Error during search operations."""

    pass


class StoreUnavailableError(SearchError):
    """The document store or query log could not be queried.

    Raised by the ranker and the query-log readers. The search orchestrator
    converts it into an empty result set with a soft error message.

    Attributes:
        operation: The store operation that failed (e.g. "rank", "aggregate_top")
    """

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation

    def __str__(self) -> str:
        if self.operation:
            return f"StoreUnavailableError({self.operation}): {self.args[0]}"
        return f"StoreUnavailableError: {self.args[0]}"


# Name used by callers that think of this as the search-level condition
SearchUnavailable = StoreUnavailableError


class LogWriteError(SearchError):
    """A search event could not be appended to the query log.

    Never surfaced to callers of the search orchestrator.
    """

    pass


class ConfigurationError(CampusHubError):
    """Error in configuration or settings."""

    pass
