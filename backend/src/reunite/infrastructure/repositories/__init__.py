"""SQLAlchemy adapters for the matching store ports."""

from .item_repository import ItemRepository
from .match_repository import MatchRepository
from .rejected_pair_repository import RejectedPairRepository
from .user_stats_repository import UserStatsRepository

__all__ = [
    "ItemRepository",
    "MatchRepository",
    "RejectedPairRepository",
    "UserStatsRepository",
]
