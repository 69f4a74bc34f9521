"""Rejected pair (blacklist) SQLAlchemy model."""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, Index, UniqueConstraint, Uuid, DateTime
from sqlalchemy.sql import func

from .base import Base
from ..matching.ports import RejectedPairRecord


class RejectedPair(Base):
    """Permanent record that a lost/found pair must never be suggested again.

    The pair is stored lost -> found, so the unique constraint covers the
    logically unordered pair. Inserts rely on it for idempotency.
    """
    __tablename__ = "rejected_pair"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    lost_item_id = Column(Uuid(as_uuid=True), ForeignKey("item.id", ondelete="CASCADE"), nullable=False)
    found_item_id = Column(Uuid(as_uuid=True), ForeignKey("item.id", ondelete="CASCADE"), nullable=False)
    rejected_by = Column(Uuid(as_uuid=True), nullable=False)
    reason = Column(Text, nullable=True)  # wrong_item, wrong_brand, wrong_location, already_returned, other
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("lost_item_id", "found_item_id", name="uq_rejected_pair"),
        Index("idx_rejected_pair_found", "found_item_id"),
    )

    def to_record(self) -> RejectedPairRecord:
        return RejectedPairRecord(
            lost_item_id=self.lost_item_id,
            found_item_id=self.found_item_id,
            rejected_by=self.rejected_by,
            reason=self.reason,
            details=self.details,
            created_at=self.created_at,
        )

    def to_dict(self):
        return {
            "id": str(self.id),
            "lost_item_id": str(self.lost_item_id),
            "found_item_id": str(self.found_item_id),
            "rejected_by": str(self.rejected_by),
            "reason": self.reason,
            "details": self.details,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
