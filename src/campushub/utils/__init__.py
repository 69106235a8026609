"""Utility modules for CampusHub."""

from campushub.utils.exceptions import (
    CampusHubError,
    ConfigurationError,
    LogWriteError,
    SearchError,
    SearchUnavailable,
    StoreUnavailableError,
)

__all__ = [
    "CampusHubError",
    "ConfigurationError",
    "LogWriteError",
    "SearchError",
    "SearchUnavailable",
    "StoreUnavailableError",
]
