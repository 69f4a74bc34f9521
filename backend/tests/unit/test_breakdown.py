"""Unit tests for the MatchBreakdown value object"""

import dataclasses

import pytest

from reunite.domain.matching.breakdown import MAX_TOTAL_SCORE, SCORE_WEIGHTS, MatchBreakdown


def test_weights_sum_past_the_cap():
    assert sum(SCORE_WEIGHTS.values()) == 104
    assert MAX_TOTAL_SCORE == 100


def test_build_sums_components():
    breakdown = MatchBreakdown.build(10, 25, 12, 9, 0, 4, 2, 1)
    assert breakdown.total_score == 63


def test_build_caps_total():
    breakdown = MatchBreakdown.build(**SCORE_WEIGHTS)
    assert breakdown.total_score == 100


def test_is_immutable():
    breakdown = MatchBreakdown.build(10, 25, 12, 9, 0, 4, 2, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        breakdown.total_score = 99


def test_dict_round_trip_keeps_all_components():
    breakdown = MatchBreakdown.build(10, 17, 20, 13, 15, 8, 4, 2)
    data = breakdown.to_dict()

    assert set(data) == set(SCORE_WEIGHTS) | {"total_score"}
    assert MatchBreakdown.from_dict(data) == breakdown


def test_from_dict_recomputes_total_and_fills_gaps():
    breakdown = MatchBreakdown.from_dict({"category_score": 10, "location_score": 25, "total_score": 3})
    assert breakdown.fuzzy_score == 0
    assert breakdown.total_score == 35
