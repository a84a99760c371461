"""Scoring inputs: immutable snapshots built from ORM rows at the data boundary.

Comma-separated columns are parsed into tag sets exactly once here, and the
researcher's two rate namings are collapsed into one resolved range, so the
scorers in ``algorithm`` never deal with raw text or missing columns.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from app.models.core import Organization
from app.models.projects import Project
from app.models.researchers import ResearcherProfile
from app.modules.matching.similarity import NumericRange, parse_list

DEFAULT_ESTIMATED_HOURS = 100
DEFAULT_MAX_CONCURRENT_PROJECTS = 3


def _to_float(value: Any) -> float:
    """Lenient numeric coercion: None, blanks and garbage become 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return 0.0
    return float(number) if number.is_finite() else 0.0


def _to_int(value: Any) -> int:
    return int(_to_float(value))


def _to_date(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def resolve_rate_range(
    hourly_rate_min: Any,
    hourly_rate_max: Any,
    rate_min: Any,
    rate_max: Any,
) -> NumericRange:
    """Pick hourly_rate_* when populated, otherwise fall back to rate_*.

    Each bound is resolved on its own, so a profile with only
    hourly_rate_min and rate_max still yields a usable range.
    """
    lo = _to_float(hourly_rate_min) or _to_float(rate_min)
    hi = _to_float(hourly_rate_max) or _to_float(rate_max)
    return NumericRange(lo or None, hi or None)


@dataclass(frozen=True)
class ProjectProfile:
    project_id: Any
    expertise_tags: frozenset[str]
    methods_required: frozenset[str]
    budget: NumericRange
    estimated_hours: int
    start_date: date | None
    focus_areas: frozenset[str]

    @classmethod
    def from_models(
        cls, project: Project, organization: Organization | None = None
    ) -> ProjectProfile:
        budget_min = _to_float(project.budget_min)
        budget_max = _to_float(project.budget_max) or budget_min
        return cls(
            project_id=project.id,
            # The problem statement stands in for the expertise a project needs
            expertise_tags=parse_list(project.problem or project.outcomes or ""),
            methods_required=parse_list(project.methods_required),
            budget=NumericRange(budget_min or None, budget_max or None),
            estimated_hours=_to_int(project.estimated_hours) or DEFAULT_ESTIMATED_HOURS,
            start_date=_to_date(project.start_date),
            focus_areas=parse_list(organization.focus_areas) if organization else frozenset(),
        )


@dataclass(frozen=True)
class CandidateProfile:
    user_id: Any
    expertise: frozenset[str]
    methods: frozenset[str]
    domains: frozenset[str]
    tools: frozenset[str]
    rate: NumericRange
    current_projects_count: int
    max_concurrent_projects: int
    available_start_date: date | None
    projects_completed: int

    @classmethod
    def from_model(cls, profile: ResearcherProfile) -> CandidateProfile:
        return cls(
            user_id=profile.user_id,
            expertise=parse_list(profile.expertise),
            methods=parse_list(profile.methods),
            domains=parse_list(profile.domains),
            tools=parse_list(profile.tools),
            rate=resolve_rate_range(
                profile.hourly_rate_min,
                profile.hourly_rate_max,
                profile.rate_min,
                profile.rate_max,
            ),
            current_projects_count=max(_to_int(profile.current_projects_count), 0),
            max_concurrent_projects=(
                _to_int(profile.max_concurrent_projects) or DEFAULT_MAX_CONCURRENT_PROJECTS
            ),
            available_start_date=_to_date(profile.available_start_date),
            projects_completed=max(_to_int(profile.projects_completed), 0),
        )
