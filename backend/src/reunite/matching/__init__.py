"""Matching engine: text/attribute/geo/image scoring, finder, orchestration.

Only the pure scoring modules are re-exported here; models import
`reunite.matching.ports`, so this package must not import repositories or
routers at import time.
"""

from .ports import (
    ItemProfile,
    ScoredCandidate,
    MatchRecord,
    RejectionFeedback,
    RejectionStats,
    RejectedPairRecord,
    ItemStorePort,
    MatchStorePort,
    BlacklistStorePort,
    UserStatsStorePort,
)
from .scorer import MatchScorer
from .finder import MatchFinder

__all__ = [
    "ItemProfile",
    "ScoredCandidate",
    "MatchRecord",
    "RejectionFeedback",
    "RejectionStats",
    "RejectedPairRecord",
    "ItemStorePort",
    "MatchStorePort",
    "BlacklistStorePort",
    "UserStatsStorePort",
    "MatchScorer",
    "MatchFinder",
]
