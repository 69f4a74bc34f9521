"""Unit tests for abuse detection policy"""

import pytest

from reunite.config import Settings
from reunite.rejection.abuse_policy import AbusePolicy, evaluate_abuse, rejection_ratio

POLICY = AbusePolicy()


def test_rejection_ratio():
    assert rejection_ratio(0, 0) == 0.0
    assert rejection_ratio(4, 1) == pytest.approx(0.8)
    assert rejection_ratio(1, 3) == pytest.approx(0.25)


def test_new_user_is_clean():
    assessment = evaluate_abuse(0, 0, 0, POLICY)
    assert assessment.suspicious is False
    assert assessment.rewards_disabled is False


def test_ratio_rule_needs_minimum_rejections():
    """Four straight rejections are a 100% ratio but below the minimum count"""
    assert evaluate_abuse(4, 0, 0, POLICY).suspicious is False
    assert evaluate_abuse(5, 0, 0, POLICY).suspicious is True


def test_ratio_rule_respects_acceptances():
    assert evaluate_abuse(8, 0, 2, POLICY).suspicious is True
    assert evaluate_abuse(8, 0, 3, POLICY).suspicious is False


def test_high_score_rule_flags_on_its_own():
    assessment = evaluate_abuse(3, 3, 20, POLICY)
    assert assessment.suspicious is True
    assert assessment.rewards_disabled is False


def test_rewards_disabled_after_repeated_high_score_rejections():
    assessment = evaluate_abuse(5, 5, 50, POLICY)
    assert assessment.suspicious is True
    assert assessment.rewards_disabled is True


def test_flags_clear_when_counters_recover():
    """Flags are recomputed from counters, not sticky"""
    assert evaluate_abuse(5, 0, 1, POLICY).suspicious is True
    assert evaluate_abuse(5, 0, 5, POLICY).suspicious is False


def test_is_high_score():
    assert POLICY.is_high_score(80) is True
    assert POLICY.is_high_score(79) is False
    assert POLICY.is_high_score(None) is False


def test_from_settings():
    policy = AbusePolicy.from_settings(Settings(HIGH_SCORE_REJECTION_THRESHOLD=90, ABUSE_MIN_REJECTIONS=2))
    assert policy.high_score_threshold == 90
    assert policy.min_rejections == 2
    assert policy.rejection_ratio == 0.8
