"""Match repository for database operations"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Set
from uuid import UUID

from sqlalchemy import select, update, or_, and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...domain.matching.breakdown import MatchBreakdown
from ...domain.matching.errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from ...domain.matching.status import ItemType, MatchStatus, can_transition_match
from ...matching.ports import MatchRecord, MatchStorePort, RejectionFeedback
from ...models.match import Match

logger = logging.getLogger(__name__)

ROLE_FLAGS = {
    "owner": "owner_accepted",
    "finder": "finder_accepted",
}


class MatchRepository(MatchStorePort):
    """SQLAlchemy adapter for the match store.

    Status changes that must not double-apply (rejection, acceptance) are
    single conditional UPDATE statements; the affected row count tells the
    caller whether this call won.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def create_match(self, lost_item_id: UUID, found_item_id: UUID, breakdown: MatchBreakdown) -> MatchRecord:
        """Persist a new pending match.

        Raises:
            ConflictError: A match for this pair already exists
            SQLAlchemyError: Storage failure (after rollback)
        """
        match = Match(
            lost_item_id=lost_item_id,
            found_item_id=found_item_id,
            score=breakdown.total_score,
            breakdown=breakdown.to_dict(),
            status=MatchStatus.PENDING.value,
        )
        self.db.add(match)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Match already exists for lost={lost_item_id} found={found_item_id}") from e
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return match.to_record()

    def get_match(self, match_id: UUID) -> Optional[MatchRecord]:
        match = self.db.get(Match, match_id)
        return match.to_record() if match else None

    def update_match_status(self, match_id: UUID, status: MatchStatus, **fields: Any) -> MatchRecord:
        """Transition a match and set extra columns in one commit.

        Raises:
            NotFoundError: Match does not exist
            InvalidTransitionError: Transition not allowed
        """
        match = self.db.get(Match, match_id)
        if match is None:
            raise NotFoundError(f"Match {match_id} not found")

        current = MatchStatus(match.status)
        if not can_transition_match(current, status):
            raise InvalidTransitionError(
                f"Match {match_id} cannot move from {current.value} to {status.value}"
            )

        match.status = status.value
        for name, value in fields.items():
            setattr(match, name, value)

        self._commit()
        return match.to_record()

    def mark_rejected(self, match_id: UUID, feedback: Optional[RejectionFeedback]) -> bool:
        """Compare-and-set pending -> rejected.

        Returns:
            True if this call rejected the match, False if it was already rejected

        Raises:
            NotFoundError: Match does not exist
            InvalidTransitionError: Match already succeeded
        """
        stmt = (
            update(Match)
            .where(and_(Match.id == match_id, Match.status == MatchStatus.PENDING.value))
            .values(
                status=MatchStatus.REJECTED.value,
                rejected_at=datetime.now(timezone.utc),
                rejection_count=Match.rejection_count + 1,
                feedback=feedback.to_dict() if feedback else None,
            )
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        if result.rowcount == 1:
            return True

        # Lost the race or never pending: find out which
        self.db.expire_all()
        match = self.db.get(Match, match_id)
        if match is None:
            raise NotFoundError(f"Match {match_id} not found")
        if match.status == MatchStatus.REJECTED.value:
            return False
        raise InvalidTransitionError(f"Match {match_id} cannot move from {match.status} to rejected")

    def set_acceptance(self, match_id: UUID, role: str) -> bool:
        """Set the role's acceptance flag on a pending match.

        Returns:
            True if the flag flipped, False if it was already set
        """
        flag = ROLE_FLAGS.get(role)
        if flag is None:
            raise ValidationError(f"Unknown role: {role}")

        column = getattr(Match, flag)
        stmt = (
            update(Match)
            .where(and_(Match.id == match_id, Match.status == MatchStatus.PENDING.value, column.is_(False)))
            .values({flag: True})
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return result.rowcount == 1

    def matches_for_item(self, item_id: UUID) -> List[MatchRecord]:
        query = (
            select(Match)
            .where(or_(Match.lost_item_id == item_id, Match.found_item_id == item_id))
            .order_by(Match.score.desc(), Match.created_at)
        )
        return [match.to_record() for match in self.db.execute(query).scalars().all()]

    def matched_partner_ids(self, item_id: UUID, item_type: str) -> Set[UUID]:
        if ItemType(item_type) == ItemType.LOST:
            query = select(Match.found_item_id).where(Match.lost_item_id == item_id)
        else:
            query = select(Match.lost_item_id).where(Match.found_item_id == item_id)
        return set(self.db.execute(query).scalars().all())
