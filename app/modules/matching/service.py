"""Matching service: ranked researcher/project recommendations and score explanations.

Read-only: records are batch-fetched through ``repository``, converted to
scoring snapshots, scored in memory and paginated. Nothing is persisted.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.models.core import Organization, User
from app.models.enums import ProjectStatus
from app.models.projects import Project
from app.models.researchers import ResearcherProfile
from app.modules.matching import repository
from app.modules.matching.algorithm import (
    FACTOR_MAX,
    FACTORS,
    MatchScore,
    calculate_match_score,
    percentage_of_max,
    rank_matches,
)
from app.modules.matching.profiles import CandidateProfile, ProjectProfile
from app.modules.matching.schemas import (
    ExplainedResearcherRef,
    FactorExplanation,
    MatchExplanationResponse,
    MatchQuery,
    OrganizationRef,
    PaginationResponse,
    ProjectMatchesResponse,
    ProjectMatchResponse,
    ProjectRef,
    ProjectSummary,
    ResearcherMatchesResponse,
    ResearcherMatchResponse,
    ResearcherRef,
    ResearcherSummary,
    ScoreBreakdownResponse,
)
from app.modules.matching.similarity import parse_list

logger = structlog.get_logger()

_FACTOR_EXPLANATIONS: dict[str, str] = {
    "expertise": "Expertise overlap based on Jaccard similarity",
    "methods": "Required methods coverage",
    "budget": "Budget compatibility based on hourly rate and estimated hours",
    "availability": "Start date alignment and capacity check",
    "experience": "Based on {projects_completed} completed projects",
    "domain": "Research domain alignment with organization focus",
}


# ── Helpers ───────────────────────────────────────────────────────────────────


def _tags(text: str | None) -> list[str]:
    return sorted(parse_list(text))


def _paginate(ranked: list, query: MatchQuery) -> tuple[list, PaginationResponse]:
    total = len(ranked)
    page = ranked[query.offset:query.offset + query.limit]
    return page, PaginationResponse(
        total=total,
        limit=query.limit,
        offset=query.offset,
        has_more=query.offset + query.limit < total,
    )


def _breakdown_response(score: MatchScore) -> ScoreBreakdownResponse:
    return ScoreBreakdownResponse(**score.breakdown.to_dict())


def _project_ref(project: Project) -> ProjectRef:
    return ProjectRef(
        project_id=project.id,
        title=project.title,
        status=project.status.value,
    )


def _researcher_summary(
    profile: ResearcherProfile, candidate: CandidateProfile, user: User
) -> ResearcherSummary:
    return ResearcherSummary(
        user_id=profile.user_id,
        name=user.full_name,
        title=profile.title,
        affiliation=profile.affiliation,
        institution=profile.institution,
        expertise=sorted(candidate.expertise),
        methods=sorted(candidate.methods),
        domains=sorted(candidate.domains),
        tools=sorted(candidate.tools),
        research_interests=profile.research_interests,
        compliance_certifications=profile.compliance_certifications,
        rate_min=candidate.rate.min,
        rate_max=candidate.rate.max,
        availability=profile.availability,
        projects_completed=candidate.projects_completed,
    )


def _project_summary(project: Project, org: Organization | None) -> ProjectSummary:
    return ProjectSummary(
        project_id=project.id,
        title=project.title,
        problem=project.problem,
        outcomes=project.outcomes,
        timeline=project.timeline,
        budget_min=float(project.budget_min) if project.budget_min is not None else None,
        budget_max=float(project.budget_max) if project.budget_max is not None else None,
        start_date=project.start_date,
        methods_required=_tags(project.methods_required),
        organization=OrganizationRef(id=org.id, name=org.name) if org else None,
    )


# ── Project → researchers ─────────────────────────────────────────────────────


async def find_matches_for_project(
    db: AsyncSession,
    project_id: uuid.UUID,
    query: MatchQuery | None = None,
) -> ProjectMatchesResponse:
    query = query or MatchQuery()

    project = await repository.get_project(db, project_id)
    if not project:
        raise NotFoundError(f"Project {project_id} not found")

    organization = await repository.get_organization(db, project.org_id)
    anchor = ProjectProfile.from_models(project, organization)

    profiles = await repository.list_researcher_profiles(db)
    users = await repository.get_active_users(db, (p.user_id for p in profiles))

    candidates = [
        (profile, CandidateProfile.from_model(profile), users[profile.user_id])
        for profile in profiles
        if profile.user_id in users
    ]
    ranked = rank_matches(
        candidates,
        lambda c: calculate_match_score(anchor, c[1]),
        min_score=query.min_score,
    )
    page, pagination = _paginate(ranked, query)

    logger.info(
        "project_matches_ranked",
        project_id=str(project_id),
        candidates=len(candidates),
        matched=pagination.total,
        min_score=query.min_score,
    )

    return ProjectMatchesResponse(
        project=_project_ref(project),
        matches=[
            ResearcherMatchResponse(
                researcher=_researcher_summary(profile, candidate, user),
                match_score=score.total_score,
                score_breakdown=_breakdown_response(score),
                strengths=score.strengths,
                concerns=score.concerns,
            )
            for (profile, candidate, user), score in page
        ],
        pagination=pagination,
    )


# ── Researcher → projects ─────────────────────────────────────────────────────


async def find_matches_for_researcher(
    db: AsyncSession,
    researcher_id: uuid.UUID,
    query: MatchQuery | None = None,
) -> ResearcherMatchesResponse:
    query = query or MatchQuery()

    profile = await repository.get_researcher_profile(db, researcher_id)
    if not profile:
        raise NotFoundError(f"Researcher profile {researcher_id} not found")

    anchor = CandidateProfile.from_model(profile)
    users = await repository.get_active_users(db, [researcher_id])

    projects = await repository.list_projects_by_status(db, ProjectStatus.OPEN)
    orgs = await repository.get_organizations(db, (p.org_id for p in projects))

    candidates = [
        (project, orgs.get(project.org_id) if project.org_id else None)
        for project in projects
    ]
    ranked = rank_matches(
        candidates,
        lambda c: calculate_match_score(ProjectProfile.from_models(c[0], c[1]), anchor),
        min_score=query.min_score,
    )
    page, pagination = _paginate(ranked, query)

    logger.info(
        "researcher_matches_ranked",
        researcher_id=str(researcher_id),
        candidates=len(candidates),
        matched=pagination.total,
        min_score=query.min_score,
    )

    user = users.get(researcher_id)
    return ResearcherMatchesResponse(
        researcher=ResearcherRef(
            user_id=researcher_id,
            name=user.full_name if user else None,
        ),
        matches=[
            ProjectMatchResponse(
                project=_project_summary(project, org),
                match_score=score.total_score,
                score_breakdown=_breakdown_response(score),
                strengths=score.strengths,
                concerns=score.concerns,
            )
            for (project, org), score in page
        ],
        pagination=pagination,
    )


# ── Explain ───────────────────────────────────────────────────────────────────


def explain_breakdown(score: MatchScore, projects_completed: int) -> dict[str, FactorExplanation]:
    """Per-factor score, max, percentage of max and a one-line rationale."""
    breakdown = score.breakdown.to_dict()
    return {
        factor: FactorExplanation(
            score=breakdown[factor],
            max=FACTOR_MAX[factor],
            percentage=percentage_of_max(factor, breakdown[factor]),
            explanation=_FACTOR_EXPLANATIONS[factor].format(
                projects_completed=projects_completed
            ),
        )
        for factor in FACTORS
    }


async def explain_match(
    db: AsyncSession,
    project_id: uuid.UUID | None,
    researcher_id: uuid.UUID | None,
) -> MatchExplanationResponse:
    if project_id is None or researcher_id is None:
        raise ValidationError("Both project_id and researcher_id are required")

    project = await repository.get_project(db, project_id)
    profile = await repository.get_researcher_profile(db, researcher_id)
    if not project or not profile:
        raise NotFoundError("Project or researcher not found")

    organization = await repository.get_organization(db, project.org_id)
    candidate = CandidateProfile.from_model(profile)
    score = calculate_match_score(ProjectProfile.from_models(project, organization), candidate)

    logger.info(
        "match_explained",
        project_id=str(project_id),
        researcher_id=str(researcher_id),
        total_score=score.total_score,
    )

    return MatchExplanationResponse(
        total_score=score.total_score,
        breakdown=explain_breakdown(score, candidate.projects_completed),
        strengths=score.strengths,
        concerns=score.concerns,
        project=_project_ref(project),
        researcher=ExplainedResearcherRef(
            user_id=profile.user_id,
            title=profile.title,
            institution=profile.institution,
        ),
    )
