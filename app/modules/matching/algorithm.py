"""Matching Algorithm: pure deterministic scoring between projects and researchers.

Six independent factors add up to 100 points:

    expertise 30 · methods 25 · budget 15 · availability 10 · experience 10 · domain 10

Every factor is a plain function over the snapshots in ``profiles``; none of
them raises on bad data, they score 0 instead. Sub-scores and the total are
rounded half-up to one decimal.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TypeVar

from app.modules.matching.profiles import CandidateProfile, ProjectProfile
from app.modules.matching.similarity import (
    NumericRange,
    jaccard_similarity,
    range_overlap,
    round_half_up,
)

T = TypeVar("T")

# ── Factor maxima ─────────────────────────────────────────────────────────────

FACTOR_MAX: dict[str, int] = {
    "expertise": 30,
    "methods": 25,
    "budget": 15,
    "availability": 10,
    "experience": 10,
    "domain": 10,
}

FACTORS: tuple[str, ...] = tuple(FACTOR_MAX)

# (upper bound on projects_completed, points); anything above the last bound gets 10
_EXPERIENCE_STEPS: tuple[tuple[int, int], ...] = (
    (0, 0),
    (2, 3),
    (5, 5),
    (10, 7),
    (20, 9),
)


# ── Strength / concern thresholds ─────────────────────────────────────────────


@dataclass(frozen=True)
class TagThreshold:
    """A tag fires when at_least <= score < below (either bound optional)."""

    factor: str
    message: str
    at_least: float | None = None
    below: float | None = None

    def applies(self, score: float) -> bool:
        if self.at_least is not None and score < self.at_least:
            return False
        if self.below is not None and score >= self.below:
            return False
        return True


STRENGTH_THRESHOLDS: tuple[TagThreshold, ...] = (
    TagThreshold("expertise", "Strong expertise match ({percentage}%)", at_least=20),
    TagThreshold("methods", "All required methods present", at_least=25),
    TagThreshold("methods", "Most required methods present", at_least=15, below=25),
    TagThreshold("budget", "Rate fits within budget", at_least=12),
    TagThreshold("availability", "Available and has capacity", at_least=10),
    TagThreshold("experience", "Highly experienced ({projects_completed} projects)", at_least=8),
)

CONCERN_THRESHOLDS: tuple[TagThreshold, ...] = (
    TagThreshold("expertise", "Limited expertise overlap", below=15),
    TagThreshold("methods", "Missing some required methods", below=15),
    TagThreshold("budget", "Rate may not fit budget", below=8),
    TagThreshold("availability", "May not be available or at capacity", below=5),
    TagThreshold("domain", "Different research domain focus", below=5),
)


# ── Result types ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScoreBreakdown:
    expertise: float = 0.0
    methods: float = 0.0
    budget: float = 0.0
    availability: float = 0.0
    experience: float = 0.0
    domain: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in FACTORS}


@dataclass(frozen=True)
class MatchScore:
    total_score: float
    breakdown: ScoreBreakdown
    strengths: list[str] = field(default_factory=list)
    concerns: list[str] = field(default_factory=list)


def percentage_of_max(factor: str, score: float) -> int:
    return int(round_half_up(score / FACTOR_MAX[factor] * 100, 0))


# ── Factor scorers ────────────────────────────────────────────────────────────


def score_expertise(project_tags: frozenset[str], researcher_tags: frozenset[str]) -> float:
    if not project_tags or not researcher_tags:
        return 0.0
    similarity = jaccard_similarity(project_tags, researcher_tags)
    return round_half_up(similarity * FACTOR_MAX["expertise"])


def score_methods(required: frozenset[str], available: frozenset[str]) -> float:
    if not required:
        # Nothing required, nothing to miss
        return float(FACTOR_MAX["methods"])
    if not available:
        return 0.0
    matched = len(required & available)
    return round_half_up(matched / len(required) * FACTOR_MAX["methods"])


def score_budget(budget: NumericRange, rate: NumericRange, estimated_hours: int) -> float:
    if not budget.min or not rate.min:
        return 0.0
    cost = NumericRange(
        rate.min * estimated_hours,
        rate.max * estimated_hours if rate.max else None,
    )
    return round_half_up(range_overlap(budget, cost) * FACTOR_MAX["budget"])


def score_availability(project: ProjectProfile, researcher: CandidateProfile) -> float:
    score = 0.0

    if researcher.current_projects_count < researcher.max_concurrent_projects:
        score += 5

    if project.start_date is None:
        score += 5
    elif (
        researcher.available_start_date is not None
        and researcher.available_start_date <= project.start_date
    ):
        score += 5

    return score


def score_experience(projects_completed: int) -> float:
    for upper, points in _EXPERIENCE_STEPS:
        if projects_completed <= upper:
            return float(points)
    return float(FACTOR_MAX["experience"])


def score_domain(focus_areas: frozenset[str], domains: frozenset[str]) -> float:
    if not focus_areas or not domains:
        return 0.0
    similarity = jaccard_similarity(focus_areas, domains)
    return round_half_up(similarity * FACTOR_MAX["domain"])


# ── Aggregation ───────────────────────────────────────────────────────────────


def _render_tags(
    thresholds: Iterable[TagThreshold],
    breakdown: ScoreBreakdown,
    researcher: CandidateProfile,
) -> list[str]:
    tags: list[str] = []
    for threshold in thresholds:
        score = getattr(breakdown, threshold.factor)
        if threshold.applies(score):
            tags.append(
                threshold.message.format(
                    percentage=percentage_of_max(threshold.factor, score),
                    projects_completed=researcher.projects_completed,
                )
            )
    return tags


def calculate_match_score(project: ProjectProfile, researcher: CandidateProfile) -> MatchScore:
    """Score one project/researcher pair. Pure: same inputs, same MatchScore."""
    breakdown = ScoreBreakdown(
        expertise=score_expertise(project.expertise_tags, researcher.expertise),
        methods=score_methods(project.methods_required, researcher.methods),
        budget=score_budget(project.budget, researcher.rate, project.estimated_hours),
        availability=score_availability(project, researcher),
        experience=score_experience(researcher.projects_completed),
        domain=score_domain(project.focus_areas, researcher.domains),
    )
    total = round_half_up(sum(breakdown.to_dict().values()))

    return MatchScore(
        total_score=total,
        breakdown=breakdown,
        strengths=_render_tags(STRENGTH_THRESHOLDS, breakdown, researcher),
        concerns=_render_tags(CONCERN_THRESHOLDS, breakdown, researcher),
    )


# ── Batch helpers ─────────────────────────────────────────────────────────────


def rank_matches(
    candidates: Iterable[T],
    score: Callable[[T], MatchScore],
    *,
    min_score: float,
) -> list[tuple[T, MatchScore]]:
    """Score every candidate, keep those >= min_score, best first.

    The sort is stable, so equal totals keep the order candidates came in.
    """
    results = [(candidate, score(candidate)) for candidate in candidates]
    results.sort(key=lambda pair: pair[1].total_score, reverse=True)
    return [pair for pair in results if pair[1].total_score >= min_score]
