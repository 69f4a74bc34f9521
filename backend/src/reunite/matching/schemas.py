"""Pydantic schemas for matching endpoints."""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from uuid import UUID
from datetime import datetime

from .ports import MatchRecord


class BreakdownSchema(BaseModel):
    """Per-signal scores of a match."""
    category_score: int = Field(ge=0, le=10)
    location_score: int = Field(ge=0, le=25)
    tfidf_score: int = Field(ge=0, le=25)
    fuzzy_score: int = Field(ge=0, le=15)
    image_score: int = Field(ge=0, le=15)
    purpose_score: int = Field(ge=0, le=8)
    attribute_score: int = Field(ge=0, le=4)
    date_score: int = Field(ge=0, le=2)
    total_score: int = Field(ge=0, le=100)


class MatchSchema(BaseModel):
    """Match with score breakdown."""
    id: UUID
    lost_item_id: UUID
    found_item_id: UUID
    score: int
    breakdown: BreakdownSchema
    status: str
    owner_accepted: bool
    finder_accepted: bool
    is_active: bool
    rejection_count: int
    feedback: Optional[Dict[str, Any]] = None
    rejected_at: Optional[datetime] = None
    returned_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: MatchRecord) -> "MatchSchema":
        return cls(
            id=record.id,
            lost_item_id=record.lost_item_id,
            found_item_id=record.found_item_id,
            score=record.score,
            breakdown=BreakdownSchema(**record.breakdown.to_dict()),
            status=record.status,
            owner_accepted=record.owner_accepted,
            finder_accepted=record.finder_accepted,
            is_active=record.is_active,
            rejection_count=record.rejection_count,
            feedback=record.feedback,
            rejected_at=record.rejected_at,
            returned_at=record.returned_at,
            created_at=record.created_at,
        )


class MatchListResponse(BaseModel):
    """Matches of one item, best score first."""
    items: List[MatchSchema]
    total: int


class RunMatchingResponse(BaseModel):
    """Result of matching a newly reported item."""
    item_id: UUID
    matches_created: int


class MatchActionRequest(BaseModel):
    """Acting user for accept / confirm-return."""
    user_id: UUID
