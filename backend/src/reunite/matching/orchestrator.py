"""Match orchestrator: run matching for a newly reported item and persist results."""

import logging
from typing import List, Optional

from ..domain.matching.errors import PartialFailure
from ..domain.matching.status import ItemStatus, ItemType
from ..observability.metrics import match_persistence_failures_total, matches_created_total
from .finder import MatchFinder
from .ports import (
    BlacklistStorePort,
    ItemProfile,
    ItemStorePort,
    MatchStorePort,
    ScoredCandidate,
)

logger = logging.getLogger(__name__)


class MatchOrchestrator:
    """Assemble the candidate pool, find matches and persist them.

    Pool rules:
    - Active items of the opposite type in the same community
    - Never the reporter's own items
    - Never a blacklisted partner
    - Never a partner that already has a match row with this item

    Each match is written independently; a failing write is logged and the
    loop moves on. Callers always get a count back: any unexpected error is
    logged and reported as zero matches so report submission never fails
    because of matching.
    """

    def __init__(
        self,
        items: ItemStorePort,
        matches: MatchStorePort,
        blacklist: BlacklistStorePort,
        finder: Optional[MatchFinder] = None,
    ):
        self.items = items
        self.matches = matches
        self.blacklist = blacklist
        self.finder = finder or MatchFinder()
        self.last_failures: List[PartialFailure] = []

    def match_new_lost_item(self, item: ItemProfile) -> int:
        return self._match(item, ItemType.LOST)

    def match_new_found_item(self, item: ItemProfile) -> int:
        return self._match(item, ItemType.FOUND)

    def match_new_item(self, item: ItemProfile) -> int:
        """Dispatch on item_type."""
        if item.item_type == ItemType.LOST.value:
            return self.match_new_lost_item(item)
        return self.match_new_found_item(item)

    def _match(self, item: ItemProfile, expected_type: ItemType) -> int:
        self.last_failures = []

        try:
            if item.item_type != expected_type.value:
                raise ValueError(f"Expected a {expected_type.value} item, got {item.item_type}")

            candidates = self._candidate_pool(item)
            found_matches = self.finder.find_matches(item, candidates)
            created = self._persist_matches(item, found_matches)

        except Exception as e:
            logger.exception(
                f"Matching failed for new {expected_type.value} item: {e}",
                extra={"item_id": str(item.id)},
            )
            return 0

        logger.info(
            "Matching completed",
            extra={
                "item_id": str(item.id),
                "item_type": item.item_type,
                "candidates": len(candidates),
                "valid_matches": len(found_matches),
                "matches_created": created,
                "failures": len(self.last_failures),
            },
        )
        return created

    def _candidate_pool(self, item: ItemProfile) -> List[ItemProfile]:
        pool = self.items.get_active_opposite_type_items(item.item_type, item.community)

        excluded = self.blacklist.rejected_partner_ids(item.id, item.item_type)
        excluded |= self.matches.matched_partner_ids(item.id, item.item_type)

        return [
            candidate for candidate in pool
            if candidate.user_id != item.user_id
            and candidate.community == item.community
            and candidate.id not in excluded
        ]

    def _persist_matches(self, item: ItemProfile, found_matches: List[ScoredCandidate]) -> int:
        created = 0

        for scored in found_matches:
            candidate = scored.candidate
            if item.is_lost:
                lost_id, found_id = item.id, candidate.id
            else:
                lost_id, found_id = candidate.id, item.id

            try:
                self.matches.create_match(lost_id, found_id, scored.breakdown)
            except Exception as e:
                self._record_failure("create_match", candidate.id, e)
                continue

            created += 1
            matches_created_total.labels(trigger=item.item_type).inc()
            self._set_matched(candidate)

        if created:
            self._set_matched(item)

        return created

    def _set_matched(self, item: ItemProfile) -> None:
        try:
            self.items.set_item_status(item.id, ItemStatus.MATCHED)
        except Exception as e:
            self._record_failure("set_item_status", item.id, e)

    def _record_failure(self, operation: str, target_id, error: Exception) -> None:
        match_persistence_failures_total.labels(operation=operation).inc()
        logger.error(
            f"{operation} failed: {error}",
            extra={"operation": operation, "target_id": str(target_id)},
        )
        self.last_failures.append(PartialFailure(operation=operation, target_id=str(target_id), error=str(error)))
