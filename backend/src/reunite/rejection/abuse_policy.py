"""Abuse detection policy for match rejections.

A user who rejects most of the matches offered to them, or keeps rejecting
matches the engine scored very highly, is flagged as suspicious (possible
reward farming or griefing). Repeated high-score rejections also switch off
rewards for that user.

The policy is a pure function over the running counters; the stats store
calls it inside the same transaction that increments them.
"""

from dataclasses import dataclass
from typing import Optional

from ..config import Settings, get_settings


@dataclass(frozen=True)
class AbusePolicy:
    """Thresholds for abuse detection.

    Attributes:
        high_score_threshold: A rejected match scoring at least this counts
            as a high-score rejection
        min_rejections: Rejections needed before the ratio rule applies
        rejection_ratio: rejections / (rejections + acceptances) that flags
        high_score_rejections: High-score rejections that flag on their own
        rewards_disable_high_score_rejections: High-score rejections that
            disable rewards
    """
    high_score_threshold: int = 80
    min_rejections: int = 5
    rejection_ratio: float = 0.8
    high_score_rejections: int = 3
    rewards_disable_high_score_rejections: int = 5

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AbusePolicy":
        settings = settings or get_settings()
        return cls(
            high_score_threshold=settings.HIGH_SCORE_REJECTION_THRESHOLD,
            min_rejections=settings.ABUSE_MIN_REJECTIONS,
            rejection_ratio=settings.ABUSE_REJECTION_RATIO,
            high_score_rejections=settings.ABUSE_HIGH_SCORE_REJECTIONS,
            rewards_disable_high_score_rejections=settings.REWARDS_DISABLE_HIGH_SCORE_REJECTIONS,
        )

    def is_high_score(self, match_score: Optional[int]) -> bool:
        return match_score is not None and match_score >= self.high_score_threshold


@dataclass(frozen=True)
class AbuseAssessment:
    suspicious: bool
    rewards_disabled: bool


def rejection_ratio(total_rejections: int, total_acceptances: int) -> float:
    decisions = total_rejections + total_acceptances
    if decisions == 0:
        return 0.0
    return total_rejections / decisions


def evaluate_abuse(
    total_rejections: int,
    high_score_rejections: int,
    total_acceptances: int,
    policy: AbusePolicy,
) -> AbuseAssessment:
    """Derive the abuse flags from a user's counters.

    Example:
        >>> evaluate_abuse(5, 0, 1, AbusePolicy()).suspicious
        True
        >>> evaluate_abuse(4, 0, 0, AbusePolicy()).suspicious
        False
    """
    ratio_rule = (
        total_rejections >= policy.min_rejections
        and rejection_ratio(total_rejections, total_acceptances) >= policy.rejection_ratio
    )
    high_score_rule = high_score_rejections >= policy.high_score_rejections

    return AbuseAssessment(
        suspicious=ratio_rule or high_score_rule,
        rewards_disabled=high_score_rejections >= policy.rewards_disable_high_score_rejections,
    )
