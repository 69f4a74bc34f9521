"""Match scoring for lost/found pairs.

Combines eight independent signals into a capped 0-100 score:

| signal    | max | source                                         |
|-----------|-----|------------------------------------------------|
| category  | 10  | exact category equality                        |
| location  | 25  | text tiers, else GPS distance tiers            |
| tfidf     | 25  | description TF-IDF cosine                      |
| fuzzy     | 15  | item-name Levenshtein similarity               |
| image     | 15  | embedding cosine                               |
| purpose   | 8   | purpose TF-IDF cosine, 2 if one side, 4 if none |
| attribute | 4   | colour / brand / model overlap                 |
| date      | 2   | day-distance bucket scaled from a 10-point scale |
"""

from datetime import datetime, timezone
from typing import Optional

from ..config import Settings, get_settings
from ..domain.matching.breakdown import MatchBreakdown, SCORE_WEIGHTS
from .attributes import attribute_score, attribute_text
from .geo import location_score
from .image_similarity import image_score
from .ports import ItemProfile
from .text_similarity import fuzzy_match, text_cosine_similarity, tfidf_similarity
from .utils import round_half_up

PURPOSE_WEIGHT = SCORE_WEIGHTS["purpose_score"]
DATE_WEIGHT = SCORE_WEIGHTS["date_score"]
CATEGORY_WEIGHT = SCORE_WEIGHTS["category_score"]

# Share of the purpose weight when one / neither side filled in a purpose
PURPOSE_ONE_SIDED_RATIO = 0.3
PURPOSE_NEUTRAL_RATIO = 0.5

# (max day distance, points on a 10-point scale), checked in order
DATE_PROXIMITY_BUCKETS = (
    (0, 10),
    (1, 9),
    (2, 8),
    (3, 7),
    (7, 5),
    (14, 3),
    (30, 1),
)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps (SQLite round-trips) are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def day_distance(date1: datetime, date2: datetime) -> int:
    """Whole days between two timestamps (partial days truncated)."""
    return abs(_as_utc(date1) - _as_utc(date2)).days


def date_proximity(date1: datetime, date2: datetime) -> int:
    """Date proximity on the 10-point scale.

    Same day 10, 1d 9, 2d 8, 3d 7, 4-7d 5, 8-14d 3, 15-30d 1, older 0.
    """
    days = day_distance(date1, date2)
    for max_days, points in DATE_PROXIMITY_BUCKETS:
        if days <= max_days:
            return points
    return 0


def date_score(lost: ItemProfile, found: ItemProfile) -> int:
    return round_half_up(date_proximity(lost.event_at, found.event_at) / 10 * DATE_WEIGHT)


def category_score(lost: ItemProfile, found: ItemProfile) -> int:
    return CATEGORY_WEIGHT if lost.category == found.category else 0


def purpose_score(lost: ItemProfile, found: ItemProfile) -> int:
    """Purpose similarity (0-8).

    Both present: cosine x 8. Exactly one present: 2 (30%). Neither: 4 (50%),
    since purpose is optional and leaving it blank should not be penalised.
    """
    lost_purpose = (lost.purpose or "").strip()
    found_purpose = (found.purpose or "").strip()

    if lost_purpose and found_purpose:
        similarity = text_cosine_similarity(lost_purpose, found_purpose)
        return min(PURPOSE_WEIGHT, round_half_up(similarity * PURPOSE_WEIGHT))
    if lost_purpose or found_purpose:
        return round_half_up(PURPOSE_WEIGHT * PURPOSE_ONE_SIDED_RATIO)
    return round_half_up(PURPOSE_WEIGHT * PURPOSE_NEUTRAL_RATIO)


class MatchScorer:
    """Score lost/found pairs and apply the validity gate.

    Scoring is pure and stateless; one instance can be shared between
    threads. Gate thresholds come from settings (MATCH_MIN_SCORE,
    MATCH_MIN_NAME_SIMILARITY).
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize scorer.

        Args:
            settings: Application settings (defaults to get_settings())
        """
        self.settings = settings or get_settings()

    def score_match(self, lost: ItemProfile, found: ItemProfile) -> MatchBreakdown:
        """Compute all eight sub-scores for a pair.

        Argument order is always (lost, found), whichever item triggered
        the search.

        Raises:
            DimensionMismatchError: If the two image embeddings differ in length
        """
        return MatchBreakdown.build(
            category_score=category_score(lost, found),
            location_score=location_score(lost, found),
            tfidf_score=tfidf_similarity(lost.description, found.description),
            fuzzy_score=fuzzy_match(lost.item_name, found.item_name),
            image_score=image_score(lost, found),
            purpose_score=purpose_score(lost, found),
            attribute_score=attribute_score(
                attribute_text(lost.item_name, lost.description),
                attribute_text(found.item_name, found.description),
            ),
            date_score=date_score(lost, found),
        )

    def is_valid_match(self, breakdown: MatchBreakdown) -> bool:
        """Validity gate: enough total score AND some name similarity."""
        if breakdown.total_score < self.settings.MATCH_MIN_SCORE:
            return False

        # Keeps completely different items from matching on location/date alone
        if breakdown.fuzzy_score < self.settings.MATCH_MIN_NAME_SIMILARITY:
            return False

        return True
