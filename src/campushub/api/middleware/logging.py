"""Request logging middleware."""

import time
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from campushub.core.logging import log_request_end
from campushub.observability.metrics import record_http_request

logger = structlog.get_logger("campushub.api.requests")

# Scrape and probe traffic is not worth a log line per request
QUIET_PATHS = {"/health", "/metrics"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each HTTP request and records request metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log request/response."""
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        route = request.scope.get("route")
        endpoint = getattr(route, "path", None) or "unmatched"
        record_http_request(request.method, endpoint, response.status_code, duration)

        if request.url.path not in QUIET_PATHS:
            log_request_end(
                logger,
                request.method,
                request.url.path,
                response.status_code,
                duration * 1000,
                request_id=getattr(request.state, "request_id", None),
                client_ip=get_client_ip(request),
                user_agent=request.headers.get("User-Agent"),
            )

        return response


def get_client_ip(request: Request) -> str | None:
    """Extract client IP from request, considering proxy headers."""
    # Check X-Forwarded-For first (for reverse proxies)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Take first IP in the chain (original client)
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host

    return None
