"""Matching module API schemas."""

import math
import uuid
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.core.config import settings


def _coerce_number(value: Any, default: float) -> float:
    """Unparseable, empty or non-finite input falls back to the default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip())
    except ValueError:
        return default
    return number if math.isfinite(number) else default


# ── Query parameters ──────────────────────────────────────────────────────────


class MatchQuery(BaseModel):
    """limit/offset/min_score, clamped into range instead of rejected."""

    limit: int = settings.MATCHING_DEFAULT_LIMIT
    offset: int = 0
    min_score: float = settings.MATCHING_DEFAULT_MIN_SCORE

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, v: Any) -> int:
        n = int(_coerce_number(v, settings.MATCHING_DEFAULT_LIMIT))
        return min(max(n, 1), settings.MATCHING_MAX_LIMIT)

    @field_validator("offset", mode="before")
    @classmethod
    def _clamp_offset(cls, v: Any) -> int:
        return max(int(_coerce_number(v, 0)), 0)

    @field_validator("min_score", mode="before")
    @classmethod
    def _clamp_min_score(cls, v: Any) -> float:
        n = _coerce_number(v, settings.MATCHING_DEFAULT_MIN_SCORE)
        return min(max(n, 0.0), 100.0)


# ── Shared ────────────────────────────────────────────────────────────────────


class ScoreBreakdownResponse(BaseModel):
    expertise: float
    methods: float
    budget: float
    availability: float
    experience: float
    domain: float


class PaginationResponse(BaseModel):
    total: int          # matches at or above min_score, before slicing
    limit: int
    offset: int
    has_more: bool


# ── Project → Researcher matches ──────────────────────────────────────────────


class ResearcherSummary(BaseModel):
    user_id: uuid.UUID
    name: str
    title: str | None = None
    affiliation: str | None = None
    institution: str | None = None
    expertise: list[str] = Field(default_factory=list)
    methods: list[str] = Field(default_factory=list)
    domains: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    research_interests: str | None = None
    compliance_certifications: str | None = None
    rate_min: float | None = None   # resolved: hourly_rate_* first, then rate_*
    rate_max: float | None = None
    availability: str | None = None
    projects_completed: int = 0


class ResearcherMatchResponse(BaseModel):
    researcher: ResearcherSummary
    match_score: float
    score_breakdown: ScoreBreakdownResponse
    strengths: list[str]
    concerns: list[str]


class ProjectRef(BaseModel):
    project_id: uuid.UUID
    title: str
    status: str


class ProjectMatchesResponse(BaseModel):
    project: ProjectRef
    matches: list[ResearcherMatchResponse]
    pagination: PaginationResponse


# ── Researcher → Project matches ──────────────────────────────────────────────


class OrganizationRef(BaseModel):
    id: uuid.UUID
    name: str


class ProjectSummary(BaseModel):
    project_id: uuid.UUID
    title: str
    problem: str | None = None
    outcomes: str | None = None
    timeline: str | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    start_date: date | None = None
    methods_required: list[str] = Field(default_factory=list)
    organization: OrganizationRef | None = None


class ProjectMatchResponse(BaseModel):
    project: ProjectSummary
    match_score: float
    score_breakdown: ScoreBreakdownResponse
    strengths: list[str]
    concerns: list[str]


class ResearcherRef(BaseModel):
    user_id: uuid.UUID
    name: str | None = None


class ResearcherMatchesResponse(BaseModel):
    researcher: ResearcherRef
    matches: list[ProjectMatchResponse]
    pagination: PaginationResponse


# ── Explain ───────────────────────────────────────────────────────────────────


class FactorExplanation(BaseModel):
    score: float
    max: int
    percentage: int
    explanation: str


class ExplainedResearcherRef(BaseModel):
    user_id: uuid.UUID
    title: str | None = None
    institution: str | None = None


class MatchExplanationResponse(BaseModel):
    total_score: float
    breakdown: dict[str, FactorExplanation]
    strengths: list[str]
    concerns: list[str]
    project: ProjectRef
    researcher: ExplainedResearcherRef
