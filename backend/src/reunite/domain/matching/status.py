"""Item and match status state machines.

Item flow:
    active -> matched -> returned
    matched -> active (every match of the item was rejected)
    returned is terminal

Match flow:
    pending -> success | rejected (both terminal)
"""

from enum import Enum
from typing import Dict, List, Optional


class ItemType(str, Enum):
    LOST = "lost"
    FOUND = "found"

    @property
    def opposite(self) -> "ItemType":
        return ItemType.FOUND if self is ItemType.LOST else ItemType.LOST


class ItemStatus(str, Enum):
    ACTIVE = "active"
    MATCHED = "matched"
    RETURNED = "returned"


class MatchStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    REJECTED = "rejected"


class RejectionReason(str, Enum):
    WRONG_ITEM = "wrong_item"
    WRONG_BRAND = "wrong_brand"
    WRONG_LOCATION = "wrong_location"
    ALREADY_RETURNED = "already_returned"
    OTHER = "other"


ITEM_TRANSITIONS: Dict[Optional[ItemStatus], List[ItemStatus]] = {
    None: [ItemStatus.ACTIVE],
    ItemStatus.ACTIVE: [ItemStatus.MATCHED],
    ItemStatus.MATCHED: [ItemStatus.ACTIVE, ItemStatus.RETURNED],
    ItemStatus.RETURNED: [],  # Terminal
}

MATCH_TRANSITIONS: Dict[Optional[MatchStatus], List[MatchStatus]] = {
    None: [MatchStatus.PENDING],
    MatchStatus.PENDING: [MatchStatus.SUCCESS, MatchStatus.REJECTED],
    MatchStatus.SUCCESS: [],  # Terminal
    MatchStatus.REJECTED: [],  # Terminal
}


def can_transition_item(from_status: Optional[ItemStatus], to_status: ItemStatus) -> bool:
    """Validate an item status change.

    Re-asserting the current status counts as allowed so repeated
    "set matched" calls stay idempotent.

    Example:
        >>> can_transition_item(ItemStatus.ACTIVE, ItemStatus.MATCHED)
        True
        >>> can_transition_item(ItemStatus.RETURNED, ItemStatus.ACTIVE)
        False
    """
    if from_status is not None and from_status == to_status:
        return True
    return to_status in ITEM_TRANSITIONS.get(from_status, [])


def can_transition_match(from_status: Optional[MatchStatus], to_status: MatchStatus) -> bool:
    """Validate a match status change.

    Example:
        >>> can_transition_match(MatchStatus.PENDING, MatchStatus.REJECTED)
        True
        >>> can_transition_match(MatchStatus.REJECTED, MatchStatus.PENDING)
        False
    """
    return to_status in MATCH_TRANSITIONS.get(from_status, [])
