"""Search endpoints across profile, skills, projects and work experience."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import SearchSettings
from ..db import get_session
from ..pipelines.search import SearchError, advanced_search, global_search
from ..schemas import AdvancedSearchResponse, ErrorResponse, SearchResponse, SearchResultDTO
from . import http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/search", tags=["search"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_search_settings(request: Request) -> SearchSettings:
    """Search settings of the running app."""
    return request.app.state.settings.search


@router.get("", response_model=SearchResponse, responses=ERROR_RESPONSES)
async def search(
    q: str | None = Query(default=None, description="Search text, at least 2 characters"),
    session: AsyncSession = Depends(get_session),
    config: SearchSettings = Depends(get_search_settings),
) -> SearchResponse:
    """Search every entity type and rank hits by title relevance."""
    try:
        query, results = await global_search(session, q, config)
    except SearchError as e:
        logger.error(f"Error performing search: {e}", exc_info=True)
        raise http_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            "Failed to perform search",
        )

    return SearchResponse(
        query=query,
        count=len(results),
        data=[SearchResultDTO(**r.to_dict()) for r in results],
    )


@router.get("/advanced", response_model=AdvancedSearchResponse, responses=ERROR_RESPONSES)
async def search_advanced(
    q: str | None = Query(default=None, description="Search text, at least 2 characters"),
    type: str | None = Query(default=None, description="One of: profile, skill, project, work"),
    category: str | None = Query(default=None, description="Exact skill category"),
    limit: int | None = Query(default=None, description="Maximum results; defaults to SEARCH_DEFAULT_LIMIT"),
    session: AsyncSession = Depends(get_session),
    config: SearchSettings = Depends(get_search_settings),
) -> AdvancedSearchResponse:
    """Filtered search. Results keep merge order and are cut to ``limit``."""
    try:
        outcome = await advanced_search(
            session,
            q,
            type_filter=type,
            category=category,
            limit=limit,
            config=config,
        )
    except SearchError as e:
        logger.error(f"Error performing advanced search: {e}", exc_info=True)
        raise http_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            "Failed to perform advanced search",
        )

    return AdvancedSearchResponse(
        query=outcome.query,
        type=outcome.type or "all",
        category=outcome.category or "all",
        count=len(outcome.results),
        data=[SearchResultDTO(**r.to_dict()) for r in outcome.results],
    )
