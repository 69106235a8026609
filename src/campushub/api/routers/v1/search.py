"""Search API endpoints.

- GET /v1/search - Ranked results with a did-you-mean suggestion
- GET /v1/search/trending - Most frequent searches
"""

from datetime import UTC, datetime
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from campushub.api.dependencies import (
    get_actor_id,
    get_app_settings,
    get_client_address,
    get_request_id,
    get_search_orchestrator,
)
from campushub.api.schemas.errors import APIError, ErrorCode
from campushub.api.schemas.search import SearchResponseBody, TrendingResponse, TrendingTerm
from campushub.config.settings import Settings
from campushub.search.orchestrator import SearchOrchestrator

logger = structlog.get_logger()

router = APIRouter(prefix="/search", tags=["search"])


@router.get(
    "",
    response_model=SearchResponseBody,
    summary="Search shared resources",
    description="""
    Full-text and substring search over resource titles and bodies.

    When nothing matches, `suggestion` may carry a spelling correction
    drawn from popular past searches. When the search store is
    unavailable the response is still 200, with empty results and
    `error` set.
    """,
    responses={
        400: {"model": APIError, "description": "Invalid X-Actor-ID header"},
        422: {"model": APIError, "description": "Query too long"},
    },
)
async def search(
    orchestrator: Annotated[SearchOrchestrator, Depends(get_search_orchestrator)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    actor_id: Annotated[int | None, Depends(get_actor_id)],
    client_address: Annotated[str | None, Depends(get_client_address)],
    request_id: Annotated[str, Depends(get_request_id)],
    q: Annotated[str, Query(description="Free-text query")] = "",
) -> SearchResponseBody:
    """Run a search and record it in the query log."""
    max_length = settings.search.max_query_length
    if len(q.strip()) > max_length:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail={
                "error_code": ErrorCode.VALIDATION_ERROR.value,
                "message": f"Query must be at most {max_length} characters",
                "request_id": request_id,
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    response = await orchestrator.search(q, actor_ref=actor_id, source_addr=client_address)
    return SearchResponseBody.from_response(response)


@router.get(
    "/trending",
    response_model=TrendingResponse,
    summary="Trending searches",
)
async def trending(
    orchestrator: Annotated[SearchOrchestrator, Depends(get_search_orchestrator)],
    limit: Annotated[int | None, Query(ge=1, le=50)] = None,
) -> TrendingResponse:
    """Most frequent searches, for the home page."""
    terms = await orchestrator.trending(limit)
    return TrendingResponse(terms=[TrendingTerm.from_term(t) for t in terms])
