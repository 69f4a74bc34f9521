"""Match finder: score a new item against a candidate pool."""

import logging
import time
from typing import Iterable, List, Optional, Set
from uuid import UUID

from ..config import Settings, get_settings
from ..domain.matching.errors import ValidationError
from ..observability.metrics import (
    candidates_prefiltered_total,
    candidates_scored_total,
    candidates_unscorable_total,
    match_score_histogram,
    match_scoring_duration_seconds,
)
from .geo import has_coordinates, is_within_radius
from .ports import ItemProfile, ScoredCandidate
from .scorer import MatchScorer

logger = logging.getLogger(__name__)


class MatchFinder:
    """Find valid matches for one item among opposite-type candidates.

    Pipeline:
    1. Skip candidates in exclude_ids
    2. GPS pre-filter (only when both items carry coordinates)
    3. score_match(lost, found), whichever side is the new item
    4. Skip candidates whose data cannot be scored (e.g. embedding size)
    5. Keep breakdowns that pass the validity gate
    6. Sort by total_score DESC; equal scores keep pool order

    Blacklist filtering is the orchestrator's job when it assembles the pool;
    exclude_ids lets callers pass the same ids here as a second check.
    """

    def __init__(self, scorer: Optional[MatchScorer] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.scorer = scorer or MatchScorer(self.settings)

    def find_matches(
        self,
        new_item: ItemProfile,
        candidate_pool: Iterable[ItemProfile],
        exclude_ids: Optional[Set[UUID]] = None,
    ) -> List[ScoredCandidate]:
        """Score the candidate pool and return valid matches, best first.

        Args:
            new_item: Newly reported item (lost or found)
            candidate_pool: Items of the opposite type
            exclude_ids: Candidate ids to skip (e.g. blacklisted partners)

        Returns:
            ScoredCandidate list sorted by total score descending
        """
        exclude_ids = exclude_ids or set()
        radius_km = self.settings.GPS_PREFILTER_RADIUS_KM
        new_has_gps = has_coordinates(new_item)
        started = time.perf_counter()

        matches: List[ScoredCandidate] = []
        scored = 0

        for candidate in candidate_pool:
            if candidate.id in exclude_ids:
                continue

            if new_has_gps and has_coordinates(candidate) and not is_within_radius(new_item, candidate, radius_km):
                candidates_prefiltered_total.inc()
                continue

            lost, found = (new_item, candidate) if new_item.is_lost else (candidate, new_item)
            try:
                breakdown = self.scorer.score_match(lost, found)
            except ValidationError as e:
                candidates_unscorable_total.labels(error=type(e).__name__).inc()
                logger.warning(
                    f"Skipping candidate that cannot be scored: {e}",
                    extra={"item_id": str(new_item.id), "candidate_id": str(candidate.id)},
                )
                continue

            scored += 1
            match_score_histogram.observe(breakdown.total_score)

            if self.scorer.is_valid_match(breakdown):
                matches.append(ScoredCandidate(candidate=candidate, breakdown=breakdown))

        # list.sort is stable, so ties keep pool order
        matches.sort(key=lambda match: match.total_score, reverse=True)

        candidates_scored_total.labels(trigger=new_item.item_type).inc(scored)
        match_scoring_duration_seconds.observe(time.perf_counter() - started)

        logger.debug(
            "Candidate pool scored",
            extra={
                "item_id": str(new_item.id),
                "scored": scored,
                "valid": len(matches),
            },
        )

        return matches
