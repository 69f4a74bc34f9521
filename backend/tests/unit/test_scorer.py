"""Unit tests for MatchScorer and the scalar sub-scores"""

from datetime import datetime, timedelta, timezone

import pytest

from reunite.config import Settings
from reunite.domain.matching.breakdown import MatchBreakdown, SCORE_WEIGHTS
from reunite.matching.scorer import (
    MatchScorer,
    date_proximity,
    date_score,
    day_distance,
    purpose_score,
)

EVENT_DAY = datetime(2024, 3, 14, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def scorer():
    return MatchScorer(Settings(MATCH_MIN_SCORE=65, MATCH_MIN_NAME_SIMILARITY=4))


@pytest.fixture
def phone_pair(make_profile):
    """Black Samsung phone reported lost and found at the library on the same day"""
    lost = make_profile(
        "lost",
        item_name="Black Samsung Phone",
        category="Phone",
        location="Library",
        description="cracked screen, black color",
    )
    found = make_profile(
        "found",
        item_name="Samsung Galaxy",
        category="Phone",
        location="Library",
        description="black phone with cracked screen",
    )
    return lost, found


class TestDateScore:

    @pytest.mark.parametrize("days,points", [
        (0, 10), (1, 9), (2, 8), (3, 7), (5, 5), (7, 5), (10, 3), (14, 3), (20, 1), (30, 1), (31, 0),
    ])
    def test_proximity_buckets(self, days, points):
        assert date_proximity(EVENT_DAY, EVENT_DAY + timedelta(days=days)) == points

    def test_partial_days_truncate(self):
        assert day_distance(EVENT_DAY, EVENT_DAY + timedelta(days=1, hours=23)) == 1

    def test_naive_timestamps_read_as_utc(self):
        naive = EVENT_DAY.replace(tzinfo=None)
        assert day_distance(naive, EVENT_DAY) == 0

    def test_ten_days_apart_scores_one(self, make_profile):
        lost = make_profile("lost", event_at=EVENT_DAY)
        found = make_profile("found", event_at=EVENT_DAY + timedelta(days=10))
        assert date_score(lost, found) == 1

    def test_same_day_scores_two(self, make_profile):
        assert date_score(make_profile("lost"), make_profile("found")) == 2


class TestPurposeScore:

    def test_neither_side(self, make_profile):
        assert purpose_score(make_profile("lost"), make_profile("found")) == 4

    def test_one_side(self, make_profile):
        lost = make_profile("lost", purpose="daily commute")
        assert purpose_score(lost, make_profile("found")) == 2
        assert purpose_score(make_profile("lost"), make_profile("found", purpose="  daily commute ")) == 2

    def test_both_sides_identical(self, make_profile):
        lost = make_profile("lost", purpose="lab notes")
        found = make_profile("found", purpose="lab notes")
        assert purpose_score(lost, found) == 8

    def test_both_sides_unrelated(self, make_profile):
        lost = make_profile("lost", purpose="gym workouts")
        found = make_profile("found", purpose="music lessons")
        assert purpose_score(lost, found) == 0


class TestScoreMatch:

    def test_same_place_same_day_phone(self, scorer, phone_pair):
        lost, found = phone_pair
        breakdown = scorer.score_match(lost, found)

        assert breakdown.category_score == 10
        assert breakdown.location_score == 25
        assert breakdown.date_score == 2
        assert breakdown.attribute_score == 4
        assert breakdown.purpose_score == 4
        assert breakdown.image_score == 0
        assert breakdown.tfidf_score > 0
        assert breakdown.fuzzy_score > 0

    def test_location_carries_heavy_weight(self, scorer, phone_pair):
        lost, found = phone_pair
        found.location = "Cafeteria"

        breakdown = scorer.score_match(lost, found)

        assert breakdown.location_score == 0
        assert breakdown.total_score < 65
        assert scorer.is_valid_match(breakdown) is False

    def test_strong_pair_passes_gate(self, scorer, make_profile):
        lost = make_profile("lost")
        found = make_profile("found")

        breakdown = scorer.score_match(lost, found)

        assert breakdown.total_score == 85
        assert scorer.is_valid_match(breakdown) is True

    def test_identical_embeddings_reach_cap(self, scorer, make_profile):
        lost = make_profile("lost", image_embedding=[0.2, 0.4, 0.1], purpose="calls")
        found = make_profile("found", image_embedding=[0.2, 0.4, 0.1], purpose="calls")

        breakdown = scorer.score_match(lost, found)

        assert breakdown.image_score == 15
        assert breakdown.total_score == 100

    def test_every_sub_score_stays_in_range(self, scorer, make_profile):
        sparse_lost = make_profile(
            "lost", item_name="", description="", location="", category="Other",
        )
        sparse_found = make_profile(
            "found", item_name="", description="", location="", category="Keys",
        )
        rich_lost = make_profile("lost", image_embedding=[1.0, 0.0], purpose="calls", area="North")
        rich_found = make_profile("found", image_embedding=[1.0, 0.0], purpose="calls", area="North")

        for lost, found in [(sparse_lost, sparse_found), (rich_lost, rich_found), (sparse_lost, rich_found)]:
            breakdown = scorer.score_match(lost, found)
            for name, weight in SCORE_WEIGHTS.items():
                assert 0 <= getattr(breakdown, name) <= weight, name
            assert 0 <= breakdown.total_score <= 100


class TestValidityGate:

    @staticmethod
    def _breakdown(filler: int, fuzzy: int) -> MatchBreakdown:
        """Breakdown totalling filler + fuzzy, filler spread within each weight."""
        parts = {}
        for name in ("location_score", "tfidf_score", "image_score", "category_score"):
            parts[name] = min(SCORE_WEIGHTS[name], filler)
            filler -= parts[name]
        return MatchBreakdown.build(
            fuzzy_score=fuzzy,
            purpose_score=0,
            attribute_score=0,
            date_score=0,
            **parts,
        )

    @pytest.mark.parametrize("fuzzy", [4, 10, 15])
    def test_low_total_always_invalid(self, scorer, fuzzy):
        breakdown = self._breakdown(64 - fuzzy, fuzzy)
        assert breakdown.total_score == 64
        assert scorer.is_valid_match(breakdown) is False

    def test_low_name_similarity_always_invalid(self, scorer):
        breakdown = MatchBreakdown.build(10, 25, 25, 3, 15, 8, 4, 2)
        assert breakdown.total_score == 92
        assert scorer.is_valid_match(breakdown) is False

    def test_threshold_boundaries_are_inclusive(self, scorer):
        breakdown = self._breakdown(61, 4)
        assert breakdown.total_score == 65
        assert scorer.is_valid_match(breakdown) is True

    def test_thresholds_come_from_settings(self):
        strict = MatchScorer(Settings(MATCH_MIN_SCORE=90, MATCH_MIN_NAME_SIMILARITY=4))
        breakdown = self._breakdown(61, 4)
        assert strict.is_valid_match(breakdown) is False
