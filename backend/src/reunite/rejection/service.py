"""Match rejection and blacklist service.

Rejecting a match is terminal for the pair: the match moves to `rejected`,
both items return to the pool, the pair is blacklisted so the finder never
suggests it again, and the rejecting user's counters feed abuse detection.

The match row and the blacklist row are the authoritative writes. Reverting
item statuses is a side effect; its failures are logged and reported as
PartialFailure entries without undoing the rejection.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set
from uuid import UUID

from ..domain.matching.errors import NotAPartyError, NotFoundError, PartialFailure
from ..domain.matching.status import ItemStatus, MatchStatus
from ..matching.ports import (
    BlacklistStorePort,
    ItemProfile,
    ItemStorePort,
    MatchRecord,
    MatchStorePort,
    RejectedPairRecord,
    RejectionFeedback,
    RejectionStats,
    UserStatsStorePort,
)
from ..observability.metrics import (
    match_persistence_failures_total,
    match_rejections_total,
    suspicious_users_flagged_total,
)

logger = logging.getLogger(__name__)


@dataclass
class RejectionResult:
    """Outcome of reject_match.

    Attributes:
        success: Always True when returned (errors raise)
        already_rejected: The match had been rejected before this call
        suspicious: Rejecting user currently carries the suspicious flag
        next_match: Best remaining pending match for the user's item
        partial_failures: Side effects that failed (logged)
    """
    success: bool
    already_rejected: bool = False
    suspicious: bool = False
    next_match: Optional[MatchRecord] = None
    partial_failures: List[PartialFailure] = field(default_factory=list)


class RejectionService:
    """Reject matches and maintain the rejected pair blacklist."""

    def __init__(
        self,
        items: ItemStorePort,
        matches: MatchStorePort,
        blacklist: BlacklistStorePort,
        stats: UserStatsStorePort,
    ):
        self.items = items
        self.matches = matches
        self.blacklist = blacklist
        self.stats = stats

    def reject_match(
        self,
        match_id: UUID,
        user_id: UUID,
        feedback: Optional[RejectionFeedback] = None,
    ) -> RejectionResult:
        """Reject a match on behalf of one of its parties.

        Retrying a rejection is safe: the second call only re-ensures the
        blacklist row. Stats are counted once and item statuses are not
        touched again.

        Args:
            match_id: Match to reject
            user_id: Rejecting user (owner of the lost or found item)
            feedback: Optional reason and free-text details

        Returns:
            RejectionResult

        Raises:
            NotFoundError: Match (or one of its items) does not exist
            NotAPartyError: User owns neither item of the match
            InvalidTransitionError: Match already succeeded
        """
        match = self.matches.get_match(match_id)
        if match is None:
            raise NotFoundError(f"Match {match_id} not found")

        lost = self.items.get_item(match.lost_item_id)
        found = self.items.get_item(match.found_item_id)
        if lost is None or found is None:
            raise NotFoundError(f"Items of match {match_id} no longer exist")

        if user_id not in (lost.user_id, found.user_id):
            raise NotAPartyError(f"User {user_id} is not a party to match {match_id}")

        transitioned = self.matches.mark_rejected(match_id, feedback)

        result = RejectionResult(success=True, already_rejected=not transitioned)

        if transitioned:
            for item in (lost, found):
                failure = self._revert_item_status(item, match_id)
                if failure:
                    result.partial_failures.append(failure)

        inserted = self.blacklist.insert_rejected_pair(match.lost_item_id, match.found_item_id, user_id, feedback)

        if transitioned:
            stats = self.stats.update_rejection_stats(user_id, match.score)
            match_rejections_total.labels(reason=feedback.reason.value if feedback else "none").inc()
        else:
            stats = self.stats.get_stats(user_id)

        result.suspicious = bool(stats and stats.suspicious_flag)
        if transitioned and result.suspicious:
            suspicious_users_flagged_total.inc()
            logger.warning(
                "Rejecting user is flagged as suspicious",
                extra={
                    "user_id": str(user_id),
                    "total_rejections": stats.total_rejections,
                    "high_score_rejections": stats.high_score_rejections,
                },
            )

        users_item = lost if user_id == lost.user_id else found
        result.next_match = self.find_next_best_match(users_item.id, exclude_match_id=match_id)

        logger.info(
            "Match rejected",
            extra={
                "match_id": str(match_id),
                "user_id": str(user_id),
                "reason": feedback.reason.value if feedback else None,
                "already_rejected": result.already_rejected,
                "blacklist_inserted": inserted,
            },
        )

        return result

    def _revert_item_status(self, item: ItemProfile, rejected_match_id: UUID) -> Optional[PartialFailure]:
        """Put an item back in the pool unless it is still matched elsewhere.

        Returned items stay returned; items with another non-rejected match
        stay matched.
        """
        if item.status == ItemStatus.RETURNED.value:
            return None

        try:
            still_matched = any(
                other.id != rejected_match_id and other.status != MatchStatus.REJECTED.value
                for other in self.matches.matches_for_item(item.id)
            )
            if still_matched:
                return None
            self.items.set_item_status(item.id, ItemStatus.ACTIVE)
        except Exception as e:
            match_persistence_failures_total.labels(operation="revert_item_status").inc()
            logger.error(
                f"Failed to revert item status after rejection: {e}",
                extra={"item_id": str(item.id), "match_id": str(rejected_match_id)},
            )
            return PartialFailure(operation="revert_item_status", target_id=str(item.id), error=str(e))

        return None

    def find_next_best_match(self, item_id: UUID, exclude_match_id: Optional[UUID] = None) -> Optional[MatchRecord]:
        """Highest-scoring pending match of the item, if any."""
        for candidate in self.matches.matches_for_item(item_id):
            if candidate.id == exclude_match_id:
                continue
            if candidate.status == MatchStatus.PENDING.value:
                return candidate
        return None

    def is_rejected_pair(self, lost_item_id: UUID, found_item_id: UUID) -> bool:
        return self.blacklist.is_rejected_pair(lost_item_id, found_item_id)

    def rejected_partner_ids(self, item_id: UUID, item_type: str) -> Set[UUID]:
        return self.blacklist.rejected_partner_ids(item_id, item_type)

    def list_rejected_pairs(self, limit: int = 100) -> List[RejectedPairRecord]:
        return self.blacklist.list_rejected_pairs(limit)

    def list_suspicious_users(self) -> List[RejectionStats]:
        return self.stats.list_suspicious_users()

    def get_user_stats(self, user_id: UUID) -> Optional[RejectionStats]:
        return self.stats.get_stats(user_id)
