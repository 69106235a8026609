"""FastAPI dependencies for API endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import Header, HTTPException, Request, status

from campushub.api.middleware.logging import get_client_ip
from campushub.api.schemas.errors import ErrorCode
from campushub.config.settings import Settings
from campushub.search.orchestrator import SearchOrchestrator

__all__ = [
    "get_actor_id",
    "get_client_address",
    "get_request_id",
    "get_search_orchestrator",
    "get_app_settings",
]


def get_request_id(request: Request) -> str:
    """Get the request ID set by RequestContextMiddleware."""
    return getattr(request.state, "request_id", None) or "unknown"


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


def get_search_orchestrator(request: Request) -> SearchOrchestrator:
    """Get the application's search orchestrator.

    The orchestrator is created once per application in ``create_app`` so
    that its pending log writes can be drained on shutdown.
    """
    return request.app.state.search_orchestrator


def get_actor_id(
    request: Request,
    x_actor_id: Annotated[str | None, Header(alias="X-Actor-ID")] = None,
) -> int | None:
    """Signed-in user id forwarded by the session layer, if any.

    Raises:
        HTTPException: 400 if the header is present but not an integer
    """
    if x_actor_id is None or not x_actor_id.strip():
        return None
    try:
        return int(x_actor_id.strip())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error_code": ErrorCode.INVALID_REQUEST.value,
                "message": "X-Actor-ID must be an integer",
                "request_id": get_request_id(request),
                "timestamp": datetime.now(UTC).isoformat(),
            },
        ) from None


def get_client_address(request: Request) -> str | None:
    """Client network address, honouring reverse-proxy headers."""
    return get_client_ip(request)
