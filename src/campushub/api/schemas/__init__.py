"""API request and response schemas."""

from .errors import APIError, ErrorCode
from .health import ComponentHealth, HealthDetailResponse, HealthResponse, HealthStatus
from .search import SearchResponseBody, SearchResultItem, TrendingResponse, TrendingTerm

__all__ = [
    "APIError",
    "ComponentHealth",
    "ErrorCode",
    "HealthDetailResponse",
    "HealthResponse",
    "HealthStatus",
    "SearchResponseBody",
    "SearchResultItem",
    "TrendingResponse",
    "TrendingTerm",
]
