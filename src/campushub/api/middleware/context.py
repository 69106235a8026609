"""Request context middleware binding a request ID to every log line."""

from typing import Callable

import uuid_utils
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from campushub.core.logging import bind_contextvars, clear_contextvars


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns each request a UUIDv7 request ID.

    Sets:
        request.state.request_id: The generated request ID
        structlog contextvar ``request_id``: For log correlation
        X-Request-ID response header: For client correlation
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with a bound request ID."""
        request_id = str(uuid_utils.uuid7())
        request.state.request_id = request_id

        clear_contextvars()
        bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            clear_contextvars()

        response.headers["X-Request-ID"] = request_id
        return response
