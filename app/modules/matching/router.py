"""Matching API router: project-side, researcher-side and explain endpoints."""

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_readonly_db
from app.core.errors import NotFoundError, ValidationError
from app.modules.matching import service
from app.modules.matching.schemas import (
    MatchExplanationResponse,
    MatchQuery,
    ProjectMatchesResponse,
    ResearcherMatchesResponse,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/matching", tags=["matching"])


def match_query(
    limit: str | None = Query(None, description="1-100, default 20"),
    offset: str | None = Query(None, description=">= 0, default 0"),
    min_score: str | None = Query(None, description="0-100, default 50"),
) -> MatchQuery:
    """Read pagination params as raw strings so bad values get clamped, not 422'd."""
    raw = {"limit": limit, "offset": offset, "min_score": min_score}
    return MatchQuery(**{k: v for k, v in raw.items() if v is not None})


@router.get(
    "/projects/{project_id}/matches",
    response_model=ProjectMatchesResponse,
)
async def get_project_matches(
    project_id: uuid.UUID,
    query: MatchQuery = Depends(match_query),
    db: AsyncSession = Depends(get_readonly_db),
):
    """Researchers ranked by match score for this project."""
    try:
        return await service.find_matches_for_project(db, project_id, query)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get(
    "/researchers/{researcher_id}/matches",
    response_model=ResearcherMatchesResponse,
)
async def get_researcher_matches(
    researcher_id: uuid.UUID,
    query: MatchQuery = Depends(match_query),
    db: AsyncSession = Depends(get_readonly_db),
):
    """Open projects ranked by match score for this researcher."""
    try:
        return await service.find_matches_for_researcher(db, researcher_id, query)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/explain", response_model=MatchExplanationResponse)
async def explain_match(
    project_id: uuid.UUID | None = Query(None),
    researcher_id: uuid.UUID | None = Query(None),
    db: AsyncSession = Depends(get_readonly_db),
):
    """Per-factor breakdown with percentages and rationale for one pair."""
    try:
        return await service.explain_match(db, project_id, researcher_id)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
