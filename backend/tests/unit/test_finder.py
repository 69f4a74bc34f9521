"""Unit tests for MatchFinder"""

import pytest

from reunite.config import Settings
from reunite.matching.finder import MatchFinder

LAT, LON = 12.9716, 77.5946


@pytest.fixture
def finder():
    return MatchFinder(settings=Settings(GPS_PREFILTER_RADIUS_KM=1.0))


def test_returns_valid_matches_best_first(finder, make_profile):
    lost = make_profile("lost")
    exact = make_profile("found")
    nearby = make_profile("found", location="Library 2nd floor")
    unrelated = make_profile(
        "found", item_name="Red Umbrella", category="Umbrella", description="folding umbrella", location="Gym",
    )

    matches = finder.find_matches(lost, [nearby, unrelated, exact])

    assert [m.candidate.id for m in matches] == [exact.id, nearby.id]
    assert matches[0].total_score == 85
    assert matches[1].total_score == 77


def test_found_trigger_scores_lost_first(finder, make_profile):
    """Breakdowns are identical whichever side triggered the search"""
    lost = make_profile("lost", gps_latitude=LAT, gps_longitude=LON)
    found = make_profile("found", location="Library 2nd floor", purpose="calls")

    from_lost = finder.find_matches(lost, [found])
    from_found = finder.find_matches(found, [lost])

    assert len(from_lost) == 1
    assert from_lost[0].breakdown == from_found[0].breakdown


def test_gps_prefilter_drops_distant_candidates(finder, make_profile):
    lost = make_profile("lost", gps_latitude=LAT, gps_longitude=LON)
    far = make_profile("found", gps_latitude=LAT + 0.05, gps_longitude=LON)
    close = make_profile("found", gps_latitude=LAT + 0.001, gps_longitude=LON)

    matches = finder.find_matches(lost, [far, close])

    assert [m.candidate.id for m in matches] == [close.id]


def test_gps_prefilter_skipped_when_either_side_lacks_coordinates(finder, make_profile):
    lost = make_profile("lost")
    far = make_profile("found", gps_latitude=LAT + 0.05, gps_longitude=LON)

    assert len(finder.find_matches(lost, [far])) == 1

    lost_with_gps = make_profile("lost", gps_latitude=LAT, gps_longitude=LON)
    no_gps = make_profile("found")

    assert len(finder.find_matches(lost_with_gps, [no_gps])) == 1


def test_equal_scores_keep_pool_order(finder, make_profile):
    lost = make_profile("lost")
    first = make_profile("found")
    second = make_profile("found")
    third = make_profile("found")

    matches = finder.find_matches(lost, [second, third, first])

    assert [m.candidate.id for m in matches] == [second.id, third.id, first.id]


def test_exclude_ids(finder, make_profile):
    lost = make_profile("lost")
    blocked = make_profile("found")
    allowed = make_profile("found")

    matches = finder.find_matches(lost, [blocked, allowed], exclude_ids={blocked.id})

    assert [m.candidate.id for m in matches] == [allowed.id]


def test_empty_pool(finder, make_profile):
    assert finder.find_matches(make_profile("lost"), []) == []


def test_candidate_with_mismatched_embedding_is_skipped(finder, make_profile):
    lost = make_profile("lost", image_embedding=[1.0, 0.0])
    other_model = make_profile("found", image_embedding=[1.0, 0.0, 0.0])
    same_model = make_profile("found", image_embedding=[1.0, 0.0])

    matches = finder.find_matches(lost, [other_model, same_model])

    assert [m.candidate.id for m in matches] == [same_model.id]
    assert matches[0].breakdown.image_score == 15
