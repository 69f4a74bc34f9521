"""Match SQLAlchemy model.

A match links exactly one lost item to one found item together with the
score and per-signal breakdown computed when it was created.
"""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint, Column, Text, Integer, Boolean, ForeignKey, Index, UniqueConstraint, Uuid, DateTime,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import false

from .base import Base, PortableJSONB, TimestampMixin
from ..domain.matching.breakdown import MatchBreakdown
from ..matching.ports import MatchRecord


class Match(TimestampMixin, Base):
    """Match between a lost and a found item.

    Status values:
    - pending: Awaiting the two parties (acceptance flags track each side)
    - success: Owner confirmed the item was returned (terminal)
    - rejected: Either party rejected the pair (terminal, blacklisted)
    """
    __tablename__ = "match"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    lost_item_id = Column(Uuid(as_uuid=True), ForeignKey("item.id", ondelete="CASCADE"), nullable=False)
    found_item_id = Column(Uuid(as_uuid=True), ForeignKey("item.id", ondelete="CASCADE"), nullable=False)

    score = Column(Integer, nullable=False, server_default="0")
    breakdown = Column(PortableJSONB, nullable=False)

    # Two-sided acceptance
    owner_accepted = Column(Boolean, nullable=False, default=False, server_default=false())
    finder_accepted = Column(Boolean, nullable=False, default=False, server_default=false())

    status = Column(Text, nullable=False, default="pending", server_default="pending")

    # Rejection bookkeeping
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejection_count = Column(Integer, nullable=False, default=0, server_default="0")
    feedback = Column(PortableJSONB, nullable=True)

    returned_at = Column(DateTime(timezone=True), nullable=True)

    lost_item = relationship("Item", foreign_keys=[lost_item_id])
    found_item = relationship("Item", foreign_keys=[found_item_id])

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'success', 'rejected')", name="status"),
        UniqueConstraint("lost_item_id", "found_item_id", name="uq_match_lost_found"),
        Index("idx_match_lost", "lost_item_id"),
        Index("idx_match_found", "found_item_id"),
    )

    @property
    def is_active(self) -> bool:
        """Both parties accepted (chat unlocked)."""
        return bool(self.owner_accepted and self.finder_accepted)

    def to_record(self) -> MatchRecord:
        return MatchRecord(
            id=self.id,
            lost_item_id=self.lost_item_id,
            found_item_id=self.found_item_id,
            score=self.score,
            breakdown=MatchBreakdown.from_dict(self.breakdown),
            status=self.status,
            owner_accepted=bool(self.owner_accepted),
            finder_accepted=bool(self.finder_accepted),
            rejection_count=self.rejection_count or 0,
            feedback=self.feedback,
            rejected_at=self.rejected_at,
            returned_at=self.returned_at,
            created_at=self.created_at,
        )
