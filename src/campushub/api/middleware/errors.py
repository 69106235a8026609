"""Error handling middleware for mapping exceptions to HTTP responses."""

from datetime import UTC, datetime
from typing import Callable

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from campushub.api.schemas.errors import APIError, ErrorCode
from campushub.core.logging import log_exception
from campushub.utils.exceptions import ConfigurationError, StoreUnavailableError

logger = structlog.get_logger()


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware that catches exceptions and returns standardized error responses.

    Search requests degrade inside the orchestrator, so a store failure
    only reaches this layer from endpoints that query a store directly.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and handle any exceptions."""
        try:
            return await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """Convert exception to JSON error response."""
        request_id = getattr(request.state, "request_id", None) or "unknown"
        status_code, error_code, message, details = self._map_exception(request, exc)

        if status_code >= 500:
            log_exception(logger, exc, path=request.url.path, request_id=request_id)

        error = APIError(
            error_code=error_code,
            message=message,
            details=details,
            request_id=request_id,
            timestamp=datetime.now(UTC),
        )

        return JSONResponse(
            status_code=status_code,
            content=error.model_dump(mode="json"),
            headers={"X-Request-ID": request_id},
        )

    def _map_exception(
        self, request: Request, exc: Exception
    ) -> tuple[int, str, str, dict | None]:
        """Map exception to (status_code, error_code, message, details)."""
        if isinstance(exc, StoreUnavailableError):
            return (
                503,
                ErrorCode.SERVICE_UNAVAILABLE.value,
                "Search store is unavailable",
                {"operation": exc.operation} if exc.operation else None,
            )

        if isinstance(exc, ValidationError):
            return (
                422,
                ErrorCode.VALIDATION_ERROR.value,
                "Request validation failed",
                {"errors": exc.errors(include_url=False, include_context=False)},
            )

        if isinstance(exc, ConfigurationError):
            return (
                500,
                ErrorCode.INTERNAL_ERROR.value,
                "Service is misconfigured",
                None,
            )

        return (
            500,
            ErrorCode.INTERNAL_ERROR.value,
            "Internal server error",
            {"type": type(exc).__name__} if self._is_debug(request) else None,
        )

    def _is_debug(self, request: Request) -> bool:
        """Check if debug mode is enabled for this app."""
        settings = getattr(request.app.state, "settings", None)
        return bool(settings and settings.DEBUG)
