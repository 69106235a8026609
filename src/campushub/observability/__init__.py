"""Observability module for CampusHub search.

Usage:
    from campushub.observability import observe_search, SearchOutcome

    with observe_search() as ctx:
        response = await orchestrator.search(q)
        ctx["outcome"] = SearchOutcome.HIT
        ctx["result_count"] = response.total
"""

from campushub.observability.metrics import (
    HTTP_REQUEST_COUNT,
    HTTP_REQUEST_DURATION,
    LOG_WRITE_FAILURES,
    SEARCH_DURATION,
    SEARCH_REQUEST_COUNT,
    SEARCH_RESULT_COUNT,
    SUGGESTIONS_OFFERED,
    VOCABULARY_SAMPLE_FAILURES,
    MetricsConfig,
    MetricsManager,
    SearchOutcome,
    create_metrics_manager,
    get_metrics,
    get_metrics_manager,
    observe_search,
    record_http_request,
    record_log_write_failure,
    record_suggestion,
    record_vocabulary_sample_failure,
)

__all__ = [
    "HTTP_REQUEST_COUNT",
    "HTTP_REQUEST_DURATION",
    "LOG_WRITE_FAILURES",
    "SEARCH_DURATION",
    "SEARCH_REQUEST_COUNT",
    "SEARCH_RESULT_COUNT",
    "SUGGESTIONS_OFFERED",
    "VOCABULARY_SAMPLE_FAILURES",
    "MetricsConfig",
    "MetricsManager",
    "SearchOutcome",
    "create_metrics_manager",
    "get_metrics",
    "get_metrics_manager",
    "observe_search",
    "record_http_request",
    "record_log_write_failure",
    "record_suggestion",
    "record_vocabulary_sample_failure",
]
