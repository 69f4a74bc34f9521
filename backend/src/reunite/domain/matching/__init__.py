"""Matching domain: value objects, state machines and errors."""

from .breakdown import MatchBreakdown, SCORE_WEIGHTS, MAX_TOTAL_SCORE
from .errors import (
    MatchingError,
    ValidationError,
    DimensionMismatchError,
    InvalidTransitionError,
    NotAPartyError,
    NotFoundError,
    ConflictError,
    PartialFailure,
)
from .status import (
    ItemType,
    ItemStatus,
    MatchStatus,
    RejectionReason,
    ITEM_TRANSITIONS,
    MATCH_TRANSITIONS,
    can_transition_item,
    can_transition_match,
)

__all__ = [
    "MatchBreakdown",
    "SCORE_WEIGHTS",
    "MAX_TOTAL_SCORE",
    "MatchingError",
    "ValidationError",
    "DimensionMismatchError",
    "InvalidTransitionError",
    "NotAPartyError",
    "NotFoundError",
    "ConflictError",
    "PartialFailure",
    "ItemType",
    "ItemStatus",
    "MatchStatus",
    "RejectionReason",
    "ITEM_TRANSITIONS",
    "MATCH_TRANSITIONS",
    "can_transition_item",
    "can_transition_match",
]
