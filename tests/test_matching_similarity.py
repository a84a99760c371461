"""Tests for tag-set parsing, Jaccard similarity and range overlap."""

import pytest

from app.modules.matching.similarity import (
    NumericRange,
    jaccard_similarity,
    parse_list,
    range_overlap,
    round_half_up,
)


class TestParseList:
    def test_splits_trims_and_lowercases(self):
        assert parse_list(" Survey, INTERVIEW ,focus groups") == {
            "survey",
            "interview",
            "focus groups",
        }

    def test_drops_empty_items(self):
        assert parse_list("survey,, ,interview,") == {"survey", "interview"}

    @pytest.mark.parametrize("value", [None, "", "   ", ",,", 42, ["survey"]])
    def test_absent_or_non_string_is_empty(self, value):
        assert parse_list(value) == frozenset()

    def test_duplicates_collapse(self):
        assert parse_list("R, r, R ") == {"r"}


class TestJaccardSimilarity:
    def test_partial_overlap(self):
        assert jaccard_similarity({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)

    def test_identical_sets(self):
        assert jaccard_similarity({"a", "b"}, {"b", "a"}) == 1.0

    def test_disjoint_sets(self):
        assert jaccard_similarity({"a"}, {"b"}) == 0.0

    def test_empty_side_is_zero(self):
        assert jaccard_similarity(set(), {"a"}) == 0.0
        assert jaccard_similarity({"a"}, set()) == 0.0
        assert jaccard_similarity(set(), set()) == 0.0


class TestRangeOverlap:
    def test_half_overlap(self):
        # overlap 5, average range length 10
        assert range_overlap(NumericRange(10, 20), NumericRange(15, 25)) == 0.5

    def test_contained_range_caps_at_one(self):
        assert range_overlap(NumericRange(10, 100), NumericRange(20, 30)) == pytest.approx(
            10 / 50
        )
        assert range_overlap(NumericRange(10, 20), NumericRange(10, 20)) == 1.0

    def test_disjoint_ranges(self):
        assert range_overlap(NumericRange(10, 20), NumericRange(30, 40)) == 0.0

    def test_touching_ranges(self):
        assert range_overlap(NumericRange(10, 20), NumericRange(20, 30)) == 0.0

    @pytest.mark.parametrize(
        "a, b",
        [
            (NumericRange(None, 20), NumericRange(15, 25)),
            (NumericRange(10, None), NumericRange(15, 25)),
            (NumericRange(10, 20), NumericRange(0, 25)),
            (NumericRange(10, 20), NumericRange(15, 0)),
        ],
    )
    def test_degenerate_ranges_score_zero(self, a, b):
        assert range_overlap(a, b) == 0.0

    def test_result_never_exceeds_one(self):
        assert range_overlap(NumericRange(1, 1000), NumericRange(2, 3)) <= 1.0


class TestRoundHalfUp:
    def test_half_rounds_away_from_even(self):
        assert round_half_up(0.25) == 0.3
        assert round_half_up(12.45) == 12.5

    def test_whole_number_places(self):
        assert round_half_up(2.5, 0) == 3.0
        assert round_half_up(33.333, 0) == 33.0
