"""SQLAlchemy Models for Reunite"""

from .base import Base
from .item import Item
from .match import Match
from .rejected_pair import RejectedPair
from .user_rejection_stats import UserRejectionStats

__all__ = [
    "Base",
    "Item",
    "Match",
    "RejectedPair",
    "UserRejectionStats",
]
