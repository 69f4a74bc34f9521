"""Per-user rejection stats repository"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...matching.ports import RejectionStats, UserStatsStorePort
from ...models.user_rejection_stats import UserRejectionStats
from ...rejection.abuse_policy import AbusePolicy, evaluate_abuse

logger = logging.getLogger(__name__)


class UserStatsRepository(UserStatsStorePort):
    """SQLAlchemy adapter for the per-user stats store.

    Every update locks the user's row (SELECT ... FOR UPDATE), increments the
    counters, recomputes the abuse flags and commits, all in one transaction.
    Concurrent rejections by the same user therefore serialize on the row.
    """

    def __init__(self, db: Session, policy: Optional[AbusePolicy] = None):
        """Initialize repository.

        Args:
            db: SQLAlchemy database session
            policy: Abuse thresholds (defaults to settings)
        """
        self.db = db
        self.policy = policy or AbusePolicy.from_settings()

    def _lock_row(self, user_id: UUID) -> UserRejectionStats:
        """Return the user's row locked for update, creating it if missing."""
        query = select(UserRejectionStats).where(UserRejectionStats.user_id == user_id).with_for_update()
        row = self.db.execute(query).scalar_one_or_none()
        if row is not None:
            return row

        row = UserRejectionStats(
            user_id=user_id,
            total_rejections=0,
            high_score_rejections=0,
            total_acceptances=0,
            suspicious_flag=False,
            rewards_disabled=False,
        )
        try:
            with self.db.begin_nested():
                self.db.add(row)
        except IntegrityError:
            # Another transaction created the row first
            return self.db.execute(query).scalar_one()
        return row

    def _apply_policy(self, row: UserRejectionStats) -> None:
        assessment = evaluate_abuse(
            total_rejections=row.total_rejections,
            high_score_rejections=row.high_score_rejections,
            total_acceptances=row.total_acceptances,
            policy=self.policy,
        )
        row.suspicious_flag = assessment.suspicious
        row.rewards_disabled = assessment.rewards_disabled

    def update_rejection_stats(self, user_id: UUID, match_score: Optional[int]) -> RejectionStats:
        """Count one rejection and recompute abuse flags atomically.

        Args:
            user_id: Rejecting user
            match_score: Total score of the rejected match

        Returns:
            Stats after the update
        """
        try:
            row = self._lock_row(user_id)
            row.total_rejections += 1
            if self.policy.is_high_score(match_score):
                row.high_score_rejections += 1
            self._apply_policy(row)
            stats = row.to_stats()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return stats

    def update_acceptance_stats(self, user_id: UUID) -> RejectionStats:
        try:
            row = self._lock_row(user_id)
            row.total_acceptances += 1
            self._apply_policy(row)
            stats = row.to_stats()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return stats

    def get_stats(self, user_id: UUID) -> Optional[RejectionStats]:
        row = self.db.get(UserRejectionStats, user_id)
        return row.to_stats() if row else None

    def list_suspicious_users(self) -> List[RejectionStats]:
        query = (
            select(UserRejectionStats)
            .where(UserRejectionStats.suspicious_flag.is_(True))
            .order_by(UserRejectionStats.high_score_rejections.desc(), UserRejectionStats.total_rejections.desc())
        )
        return [row.to_stats() for row in self.db.execute(query).scalars().all()]
