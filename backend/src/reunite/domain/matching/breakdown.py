"""Score breakdown value object."""

from dataclasses import dataclass, asdict
from typing import Any, Dict

MAX_TOTAL_SCORE = 100

# Upper bound of every sub-score
SCORE_WEIGHTS: Dict[str, int] = {
    "category_score": 10,
    "location_score": 25,
    "tfidf_score": 25,
    "fuzzy_score": 15,
    "image_score": 15,
    "purpose_score": 8,
    "attribute_score": 4,
    "date_score": 2,
}


@dataclass(frozen=True)
class MatchBreakdown:
    """Itemized per-signal scores of a lost/found pair.

    All eight components are always present. `total_score` is their sum
    capped at 100; build instances with `MatchBreakdown.build()` so the
    total can never drift from the components.
    """
    category_score: int
    location_score: int
    tfidf_score: int
    fuzzy_score: int
    image_score: int
    purpose_score: int
    attribute_score: int
    date_score: int
    total_score: int

    @classmethod
    def build(
        cls,
        category_score: int,
        location_score: int,
        tfidf_score: int,
        fuzzy_score: int,
        image_score: int,
        purpose_score: int,
        attribute_score: int,
        date_score: int,
    ) -> "MatchBreakdown":
        total = (
            category_score + location_score + tfidf_score + fuzzy_score
            + image_score + purpose_score + attribute_score + date_score
        )
        return cls(
            category_score=category_score,
            location_score=location_score,
            tfidf_score=tfidf_score,
            fuzzy_score=fuzzy_score,
            image_score=image_score,
            purpose_score=purpose_score,
            attribute_score=attribute_score,
            date_score=date_score,
            total_score=min(MAX_TOTAL_SCORE, total),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchBreakdown":
        """Rebuild from a stored JSON breakdown (missing components read as 0)."""
        data = data or {}
        return cls.build(**{name: int(data.get(name, 0)) for name in SCORE_WEIGHTS})

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
