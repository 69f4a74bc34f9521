"""Match lifecycle: two-sided acceptance and confirmed returns."""

import logging
from datetime import datetime, timezone
from typing import List, Tuple
from uuid import UUID

from ..domain.matching.errors import InvalidTransitionError, NotAPartyError, NotFoundError
from ..domain.matching.status import ItemStatus, MatchStatus, RejectionReason
from ..observability.metrics import match_acceptances_total, match_persistence_failures_total
from .ports import (
    ItemProfile,
    ItemStorePort,
    MatchRecord,
    MatchStorePort,
    RejectionFeedback,
    UserStatsStorePort,
)

logger = logging.getLogger(__name__)

OWNER = "owner"
FINDER = "finder"


class MatchLifecycleService:
    """Accept matches and confirm returns.

    The owner is the user who reported the lost item, the finder the user
    who reported the found item. Both must accept before the match is
    active; only the owner can confirm the item came back.
    """

    def __init__(self, items: ItemStorePort, matches: MatchStorePort, stats: UserStatsStorePort):
        self.items = items
        self.matches = matches
        self.stats = stats

    def _load(self, match_id: UUID) -> Tuple[MatchRecord, ItemProfile, ItemProfile]:
        match = self.matches.get_match(match_id)
        if match is None:
            raise NotFoundError(f"Match {match_id} not found")

        lost = self.items.get_item(match.lost_item_id)
        found = self.items.get_item(match.found_item_id)
        if lost is None or found is None:
            raise NotFoundError(f"Items of match {match_id} no longer exist")

        return match, lost, found

    @staticmethod
    def role_of(user_id: UUID, lost: ItemProfile, found: ItemProfile) -> str:
        if user_id == lost.user_id:
            return OWNER
        if user_id == found.user_id:
            return FINDER
        raise NotAPartyError(f"User {user_id} is not a party to this match")

    def accept_match(self, match_id: UUID, user_id: UUID) -> MatchRecord:
        """Record the user's acceptance.

        Accepting twice is a no-op; only the first acceptance counts towards
        the user's total_acceptances.

        Raises:
            NotFoundError: Match does not exist
            NotAPartyError: User owns neither item
            InvalidTransitionError: Match is no longer pending
        """
        match, lost, found = self._load(match_id)
        role = self.role_of(user_id, lost, found)

        if match.status != MatchStatus.PENDING.value:
            raise InvalidTransitionError(f"Match {match_id} is {match.status}, cannot accept")

        if ItemStatus.RETURNED.value in (lost.status, found.status):
            raise InvalidTransitionError(f"An item of match {match_id} was already returned")

        if self.matches.set_acceptance(match_id, role):
            self.stats.update_acceptance_stats(user_id)
            match_acceptances_total.labels(role=role).inc()
            logger.info(
                "Match accepted",
                extra={"match_id": str(match_id), "user_id": str(user_id), "role": role},
            )

        return self.matches.get_match(match_id)

    def confirm_return(self, match_id: UUID, user_id: UUID) -> MatchRecord:
        """Owner confirms the item was handed back.

        The match becomes `success` and both items `returned`. Other pending
        matches of either item are closed as rejected (reason
        already_returned); their partner items go back to the pool unless
        still matched elsewhere.

        Raises:
            NotFoundError: Match does not exist
            NotAPartyError: User is not the owner
            InvalidTransitionError: Match not pending or not accepted by both sides
        """
        match, lost, found = self._load(match_id)

        if self.role_of(user_id, lost, found) != OWNER:
            raise NotAPartyError("Only the owner can confirm a return")

        if not match.is_active:
            raise InvalidTransitionError(f"Match {match_id} must be accepted by both parties first")

        updated = self.matches.update_match_status(
            match_id,
            MatchStatus.SUCCESS,
            returned_at=datetime.now(timezone.utc),
        )

        for item in (lost, found):
            self.items.set_item_status(item.id, ItemStatus.RETURNED)

        closed = self._close_sibling_matches(match_id, (lost.id, found.id))

        logger.info(
            "Item returned",
            extra={"match_id": str(match_id), "lost_item_id": str(lost.id), "closed_matches": closed},
        )
        return updated

    def _close_sibling_matches(self, match_id: UUID, returned_item_ids: Tuple[UUID, UUID]) -> int:
        """Reject pending matches that still reference a returned item."""
        feedback = RejectionFeedback(reason=RejectionReason.ALREADY_RETURNED).to_dict()
        closed = 0

        for item_id in returned_item_ids:
            for sibling in self.matches.matches_for_item(item_id):
                if sibling.id == match_id or sibling.status != MatchStatus.PENDING.value:
                    continue

                self.matches.update_match_status(
                    sibling.id,
                    MatchStatus.REJECTED,
                    rejected_at=datetime.now(timezone.utc),
                    feedback=feedback,
                )
                closed += 1

                partner_id = sibling.found_item_id if sibling.lost_item_id == item_id else sibling.lost_item_id
                if partner_id not in returned_item_ids:
                    self._release_partner(partner_id)

        return closed

    def _release_partner(self, item_id: UUID) -> None:
        item = self.items.get_item(item_id)
        if item is None or item.status != ItemStatus.MATCHED.value:
            return

        still_matched = any(
            other.status != MatchStatus.REJECTED.value for other in self.matches.matches_for_item(item_id)
        )
        if still_matched:
            return

        try:
            self.items.set_item_status(item_id, ItemStatus.ACTIVE)
        except Exception as e:
            match_persistence_failures_total.labels(operation="revert_item_status").inc()
            logger.error(
                f"Failed to release item after return: {e}",
                extra={"item_id": str(item_id)},
            )

    def matches_for_item(self, item_id: UUID) -> List[MatchRecord]:
        """Matches referencing the item, best score first."""
        return self.matches.matches_for_item(item_id)
