"""Per-user rejection/acceptance counters SQLAlchemy model."""

from sqlalchemy import Column, Integer, Boolean, Uuid
from sqlalchemy.sql import false

from .base import Base, TimestampMixin
from ..matching.ports import RejectionStats


class UserRejectionStats(TimestampMixin, Base):
    """Running counters that feed abuse detection.

    One row per user, created lazily on the first rejection or acceptance.
    Rows are only ever updated under a row lock (see UserStatsRepository).
    """
    __tablename__ = "user_rejection_stats"

    user_id = Column(Uuid(as_uuid=True), primary_key=True)
    total_rejections = Column(Integer, nullable=False, default=0, server_default="0")
    high_score_rejections = Column(Integer, nullable=False, default=0, server_default="0")
    total_acceptances = Column(Integer, nullable=False, default=0, server_default="0")
    suspicious_flag = Column(Boolean, nullable=False, default=False, server_default=false())
    rewards_disabled = Column(Boolean, nullable=False, default=False, server_default=false())

    def to_stats(self) -> RejectionStats:
        return RejectionStats(
            user_id=self.user_id,
            total_rejections=self.total_rejections or 0,
            high_score_rejections=self.high_score_rejections or 0,
            total_acceptances=self.total_acceptances or 0,
            suspicious_flag=bool(self.suspicious_flag),
            rewards_disabled=bool(self.rewards_disabled),
        )
