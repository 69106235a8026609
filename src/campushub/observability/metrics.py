"""Prometheus metrics for CampusHub search.

This module provides Prometheus metrics for monitoring:
- Search requests (outcome, latency, suggestions offered)
- Query-log telemetry (write failures, vocabulary sample failures)
- HTTP requests (duration, status)
"""

from __future__ import annotations

import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    Info,
    generate_latest,
)

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "MetricsConfig",
    "MetricsManager",
    "SearchOutcome",
    "SEARCH_REQUEST_COUNT",
    "SEARCH_DURATION",
    "SEARCH_RESULT_COUNT",
    "SUGGESTIONS_OFFERED",
    "LOG_WRITE_FAILURES",
    "VOCABULARY_SAMPLE_FAILURES",
    "HTTP_REQUEST_DURATION",
    "HTTP_REQUEST_COUNT",
    "observe_search",
    "record_suggestion",
    "record_log_write_failure",
    "record_vocabulary_sample_failure",
    "record_http_request",
    "get_metrics",
    "get_metrics_manager",
    "create_metrics_manager",
]


class SearchOutcome:
    """Label values for the search outcome counter."""

    HIT = "hit"
    MISS = "miss"
    EMPTY_QUERY = "empty_query"
    UNAVAILABLE = "unavailable"


@dataclass
class MetricsConfig:
    """Configuration for Prometheus metrics.

    Attributes:
        enabled: Whether metrics collection is enabled.
        prefix: Prefix for all metric names.
        histogram_buckets: Histogram buckets for latency metrics.
    """

    enabled: bool = True
    prefix: str = "campushub"
    histogram_buckets: tuple[float, ...] = (
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
    )

    @classmethod
    def from_env(cls) -> MetricsConfig:
        """Create configuration from environment variables."""
        return cls(
            enabled=os.getenv("METRICS_ENABLED", "true").lower() == "true",
            prefix=os.getenv("METRICS_PREFIX", "campushub"),
        )


_config = MetricsConfig()

# ============================================================================
# Search Metrics
# ============================================================================

SEARCH_REQUEST_COUNT = Counter(
    f"{_config.prefix}_search_requests_total",
    "Search requests by outcome",
    ["outcome"],
)

SEARCH_DURATION = Histogram(
    f"{_config.prefix}_search_duration_seconds",
    "Time to answer a search request, suggestion included",
    ["outcome"],
    buckets=_config.histogram_buckets,
)

SEARCH_RESULT_COUNT = Histogram(
    f"{_config.prefix}_search_results",
    "Number of results returned per search",
    buckets=(0, 1, 2, 5, 10, 20, 50, 100),
)

SUGGESTIONS_OFFERED = Counter(
    f"{_config.prefix}_search_suggestions_total",
    "Zero-result searches that received a spelling suggestion",
)

# ============================================================================
# Query Log Metrics
# ============================================================================

LOG_WRITE_FAILURES = Counter(
    f"{_config.prefix}_search_log_write_failures_total",
    "Search events that could not be appended to the query log",
)

VOCABULARY_SAMPLE_FAILURES = Counter(
    f"{_config.prefix}_vocabulary_sample_failures_total",
    "Vocabulary reads that failed and fell back to an empty vocabulary",
    ["purpose"],
)

# ============================================================================
# HTTP Metrics
# ============================================================================

HTTP_REQUEST_DURATION = Histogram(
    f"{_config.prefix}_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "endpoint", "status_code"],
    buckets=_config.histogram_buckets,
)

HTTP_REQUEST_COUNT = Counter(
    f"{_config.prefix}_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

SERVICE_INFO = Info(
    f"{_config.prefix}_service",
    "Service information",
)


class MetricsManager:
    """Manages Prometheus metrics configuration and export."""

    def __init__(
        self,
        config: MetricsConfig | None = None,
        registry: CollectorRegistry | None = None,
    ) -> None:
        """Initialize the metrics manager.

        Args:
            config: Metrics configuration.
            registry: Optional custom registry for testing.
        """
        self.config = config or MetricsConfig()
        self.registry = registry or REGISTRY
        self._initialized = False

    def initialize(
        self,
        service_name: str = "campushub-search",
        service_version: str = "0.1.0",
        environment: str = "development",
    ) -> None:
        """Record service information once per process."""
        if self._initialized or not self.config.enabled:
            return

        SERVICE_INFO.info(
            {
                "name": service_name,
                "version": service_version,
                "environment": environment,
            }
        )
        self._initialized = True

    def get_metrics(self) -> bytes:
        """Generate metrics output in Prometheus format."""
        return generate_latest(self.registry)


_metrics_manager: MetricsManager | None = None


def get_metrics_manager() -> MetricsManager:
    """Get the global metrics manager instance."""
    global _metrics_manager
    if _metrics_manager is None:
        _metrics_manager = MetricsManager(MetricsConfig.from_env())
    return _metrics_manager


def create_metrics_manager(
    config: MetricsConfig | None = None,
    registry: CollectorRegistry | None = None,
) -> MetricsManager:
    """Create and register a new metrics manager.

    Args:
        config: Optional metrics configuration.
        registry: Optional custom registry.

    Returns:
        The configured MetricsManager instance.
    """
    global _metrics_manager
    _metrics_manager = MetricsManager(config, registry)
    return _metrics_manager


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return get_metrics_manager().get_metrics()


# ============================================================================
# Convenience Functions for Recording Metrics
# ============================================================================


@contextmanager
def observe_search() -> Generator[dict[str, Any], None, None]:
    """Context manager for observing one search request.

    Yields:
        Context dict; set ``outcome`` (a SearchOutcome value) and
        ``result_count`` before leaving the block.
    """
    context: dict[str, Any] = {"outcome": SearchOutcome.MISS, "result_count": 0}
    start_time = time.perf_counter()

    try:
        yield context
    except Exception:
        context["outcome"] = "error"
        raise
    finally:
        duration = time.perf_counter() - start_time
        outcome = context["outcome"]
        SEARCH_REQUEST_COUNT.labels(outcome=outcome).inc()
        SEARCH_DURATION.labels(outcome=outcome).observe(duration)
        if outcome in (SearchOutcome.HIT, SearchOutcome.MISS):
            SEARCH_RESULT_COUNT.observe(context.get("result_count", 0))


def record_suggestion() -> None:
    """Record that a zero-result search received a suggestion."""
    SUGGESTIONS_OFFERED.inc()


def record_log_write_failure() -> None:
    """Record a failed query-log append."""
    LOG_WRITE_FAILURES.inc()


def record_vocabulary_sample_failure(purpose: str) -> None:
    """Record a failed vocabulary read.

    Args:
        purpose: "suggestion" or "trending".
    """
    VOCABULARY_SAMPLE_FAILURES.labels(purpose=purpose).inc()


def record_http_request(
    method: str,
    endpoint: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record HTTP request metrics.

    Args:
        method: HTTP method.
        endpoint: Request endpoint.
        status_code: Response status code.
        duration_seconds: Request duration.
    """
    HTTP_REQUEST_DURATION.labels(
        method=method, endpoint=endpoint, status_code=str(status_code)
    ).observe(duration_seconds)
    HTTP_REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
