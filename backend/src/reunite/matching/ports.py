"""Matching ports and interfaces for hexagonal architecture.

The scoring modules work on plain `ItemProfile` snapshots. Storage is reached
only through the store ports below; SQLAlchemy adapters live in
`reunite.infrastructure.repositories`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Set
from uuid import UUID

from ..domain.matching.breakdown import MatchBreakdown
from ..domain.matching.status import ItemStatus, ItemType, MatchStatus, RejectionReason


@dataclass
class ItemProfile:
    """Snapshot of a lost or found item as read by the scoring engine.

    Attributes:
        id: Item UUID
        item_type: "lost" or "found"
        user_id: Reporting user
        community: College or "common area" scope
        item_name: Free-text item name
        category: Category from the fixed list
        description: Free-text description
        location: Free-text location (primary location signal)
        event_at: When the item was lost / found
        purpose: What the item is used for (optional)
        area: Sub-area inside the community (optional)
        gps_latitude: Reporter latitude at submission (optional)
        gps_longitude: Reporter longitude at submission (optional)
        image_embedding: Pre-computed visual embedding (optional)
        status: active | matched | returned
    """
    id: Optional[UUID]
    item_type: str
    user_id: Optional[UUID]
    community: str
    item_name: str
    category: str
    description: str
    location: str
    event_at: datetime
    purpose: Optional[str] = None
    area: Optional[str] = None
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None
    image_embedding: Optional[List[float]] = None
    status: str = ItemStatus.ACTIVE.value

    @property
    def is_lost(self) -> bool:
        return self.item_type == ItemType.LOST.value


@dataclass
class ScoredCandidate:
    """Candidate item with its breakdown against the new item."""
    candidate: ItemProfile
    breakdown: MatchBreakdown

    @property
    def total_score(self) -> int:
        return self.breakdown.total_score


@dataclass
class MatchRecord:
    """Persisted match as seen by the services."""
    id: UUID
    lost_item_id: UUID
    found_item_id: UUID
    score: int
    breakdown: MatchBreakdown
    status: str = MatchStatus.PENDING.value
    owner_accepted: bool = False
    finder_accepted: bool = False
    rejection_count: int = 0
    feedback: Optional[Dict[str, Any]] = None
    rejected_at: Optional[datetime] = None
    returned_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.owner_accepted and self.finder_accepted


@dataclass
class RejectionFeedback:
    """Structured reason a user gave for rejecting a match."""
    reason: RejectionReason
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"reason": self.reason.value, "details": self.details}


@dataclass
class RejectionStats:
    """Per-user running counters."""
    user_id: UUID
    total_rejections: int = 0
    high_score_rejections: int = 0
    total_acceptances: int = 0
    suspicious_flag: bool = False
    rewards_disabled: bool = False


@dataclass
class RejectedPairRecord:
    lost_item_id: UUID
    found_item_id: UUID
    rejected_by: UUID
    reason: Optional[str] = None
    details: Optional[str] = None
    created_at: Optional[datetime] = None


class ItemStorePort(ABC):
    """Read and status-update access to item reports."""

    @abstractmethod
    def get_item(self, item_id: UUID) -> Optional[ItemProfile]:
        pass

    @abstractmethod
    def get_active_opposite_type_items(self, item_type: str, community: str) -> List[ItemProfile]:
        """Active items of the other report type in one community."""
        pass

    @abstractmethod
    def set_item_status(self, item_id: UUID, status: ItemStatus) -> None:
        pass


class MatchStorePort(ABC):
    """Persistence of match records."""

    @abstractmethod
    def create_match(self, lost_item_id: UUID, found_item_id: UUID, breakdown: MatchBreakdown) -> MatchRecord:
        pass

    @abstractmethod
    def get_match(self, match_id: UUID) -> Optional[MatchRecord]:
        pass

    @abstractmethod
    def update_match_status(self, match_id: UUID, status: MatchStatus, **fields: Any) -> MatchRecord:
        pass

    @abstractmethod
    def mark_rejected(self, match_id: UUID, feedback: Optional[RejectionFeedback]) -> bool:
        """Move a non-rejected match to rejected.

        Returns:
            True if this call performed the transition, False if the match
            was already rejected (compare-and-set).
        """
        pass

    @abstractmethod
    def set_acceptance(self, match_id: UUID, role: str) -> bool:
        """Set owner_accepted or finder_accepted.

        Returns:
            True if the flag changed from False to True.
        """
        pass

    @abstractmethod
    def matches_for_item(self, item_id: UUID) -> List[MatchRecord]:
        """Matches referencing the item, highest score first."""
        pass

    @abstractmethod
    def matched_partner_ids(self, item_id: UUID, item_type: str) -> Set[UUID]:
        """Ids of items that already have a match row with this item."""
        pass


class BlacklistStorePort(ABC):
    """Rejected pair blacklist."""

    @abstractmethod
    def insert_rejected_pair(
        self,
        lost_item_id: UUID,
        found_item_id: UUID,
        user_id: UUID,
        feedback: Optional[RejectionFeedback],
    ) -> bool:
        """Insert a blacklist row.

        Returns:
            True if inserted, False if the pair was already blacklisted.
        """
        pass

    @abstractmethod
    def is_rejected_pair(self, lost_item_id: UUID, found_item_id: UUID) -> bool:
        pass

    @abstractmethod
    def rejected_partner_ids(self, item_id: UUID, item_type: str) -> Set[UUID]:
        pass

    @abstractmethod
    def list_rejected_pairs(self, limit: int = 100) -> List[RejectedPairRecord]:
        pass


class UserStatsStorePort(ABC):
    """Per-user rejection/acceptance counters.

    Both update methods must be atomic per user: increment and abuse-flag
    recomputation happen in one critical section.
    """

    @abstractmethod
    def update_rejection_stats(self, user_id: UUID, match_score: Optional[int]) -> RejectionStats:
        pass

    @abstractmethod
    def update_acceptance_stats(self, user_id: UUID) -> RejectionStats:
        pass

    @abstractmethod
    def get_stats(self, user_id: UUID) -> Optional[RejectionStats]:
        pass

    @abstractmethod
    def list_suspicious_users(self) -> List[RejectionStats]:
        pass
