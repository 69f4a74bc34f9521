"""Item SQLAlchemy model (lost and found reports)."""

from uuid import uuid4

from sqlalchemy import Column, Text, Float, Index, Uuid, DateTime, CheckConstraint

from .base import Base, PortableJSONB, TimestampMixin
from ..matching.ports import ItemProfile


class Item(TimestampMixin, Base):
    """A lost or found item report.

    Both report types share one table; `item_type` tells them apart and
    `event_at` holds the time the item was lost or found. Contact fields
    hold the owner's details on lost reports and the finder's on found ones.

    Status values:
    - active: Eligible for matching
    - matched: Referenced by at least one live match
    - returned: Handed back to the owner (terminal)
    """
    __tablename__ = "item"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    item_type = Column(Text, nullable=False)  # lost | found
    user_id = Column(Uuid(as_uuid=True), nullable=False)
    community = Column(Text, nullable=False)
    area = Column(Text, nullable=True)

    # Description
    item_name = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    description = Column(Text, nullable=False, server_default="")
    purpose = Column(Text, nullable=True)

    # Location (text is primary, GPS secondary)
    location = Column(Text, nullable=False)
    gps_latitude = Column(Float, nullable=True)
    gps_longitude = Column(Float, nullable=True)
    location_accuracy = Column(Float, nullable=True)  # meters

    # Media
    image_url = Column(Text, nullable=True)
    image_embedding = Column(PortableJSONB, nullable=True)

    # Reporter contact
    contact_name = Column(Text, nullable=True)
    contact_info = Column(Text, nullable=True)

    status = Column(Text, nullable=False, default="active", server_default="active")

    event_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("item_type IN ('lost', 'found')", name="item_type"),
        CheckConstraint("status IN ('active', 'matched', 'returned')", name="status"),
        Index("idx_item_pool", "item_type", "community", "status"),
        Index("idx_item_user", "user_id"),
    )

    def to_profile(self) -> ItemProfile:
        """Snapshot the fields the scoring engine reads."""
        return ItemProfile(
            id=self.id,
            item_type=self.item_type,
            user_id=self.user_id,
            community=self.community,
            item_name=self.item_name,
            category=self.category,
            description=self.description or "",
            location=self.location,
            event_at=self.event_at,
            purpose=self.purpose,
            area=self.area,
            gps_latitude=self.gps_latitude,
            gps_longitude=self.gps_longitude,
            image_embedding=list(self.image_embedding) if self.image_embedding else None,
            status=self.status or "active",
        )

    def to_dict(self):
        """Convert item to dictionary representation."""
        return {
            "id": str(self.id),
            "item_type": self.item_type,
            "user_id": str(self.user_id),
            "community": self.community,
            "area": self.area,
            "item_name": self.item_name,
            "category": self.category,
            "description": self.description,
            "purpose": self.purpose,
            "location": self.location,
            "gps_latitude": self.gps_latitude,
            "gps_longitude": self.gps_longitude,
            "image_url": self.image_url,
            "status": self.status,
            "event_at": self.event_at.isoformat() if self.event_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
