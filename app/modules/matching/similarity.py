"""Tag-set and numeric-range similarity helpers used by the matching algorithm."""

from __future__ import annotations

from collections.abc import Set
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, NamedTuple


class NumericRange(NamedTuple):
    min: float | None
    max: float | None


def parse_list(text: Any) -> frozenset[str]:
    """Split a comma-separated field into a set of lowercase, trimmed tags.

    Anything that is not a non-empty string yields an empty set.
    """
    if not text or not isinstance(text, str):
        return frozenset()
    return frozenset(
        item.strip().lower() for item in text.split(",") if item.strip()
    )


def jaccard_similarity(a: Set[str], b: Set[str]) -> float:
    """|a ∩ b| / |a ∪ b|, or 0.0 when either side is empty."""
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def range_overlap(a: NumericRange, b: NumericRange) -> float:
    """Overlap length divided by the mean length of both ranges, capped at 1.

    A bound that is missing or zero makes the range degenerate, which scores 0.
    Touching or disjoint ranges also score 0.
    """
    if not a.min or not a.max or not b.min or not b.max:
        return 0.0

    overlap_min = max(a.min, b.min)
    overlap_max = min(a.max, b.max)
    if overlap_min >= overlap_max:
        return 0.0

    avg_size = ((a.max - a.min) + (b.max - b.min)) / 2
    return min((overlap_max - overlap_min) / avg_size, 1.0)


def round_half_up(value: float, places: int = 1) -> float:
    """Round like a spreadsheet does (0.05 -> 0.1), not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
