"""Core services and utilities for CampusHub."""

from .logging import (
    bind_contextvars,
    clear_contextvars,
    get_logger,
    log_database_query,
    log_exception,
    log_request_end,
    setup_logging,
)

__all__ = [
    "bind_contextvars",
    "clear_contextvars",
    "get_logger",
    "log_database_query",
    "log_exception",
    "log_request_end",
    "setup_logging",
]
