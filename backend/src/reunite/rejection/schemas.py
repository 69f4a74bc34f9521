"""Pydantic schemas for rejection endpoints."""

from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from ..matching.schemas import MatchSchema


class RejectionFeedbackSchema(BaseModel):
    """Why the user rejected the match.

    `reason` is checked against RejectionReason in the route so an unknown
    value answers 400 rather than 422.
    """
    reason: str
    details: Optional[str] = Field(default=None, max_length=1000)


class RejectMatchRequest(BaseModel):
    """Request to reject a match."""
    user_id: UUID
    feedback: Optional[RejectionFeedbackSchema] = None


class RejectMatchResponse(BaseModel):
    """Response after rejecting a match."""
    success: bool
    message: str
    already_rejected: bool
    next_match: Optional[MatchSchema] = None


class RejectedPairSchema(BaseModel):
    """Blacklisted lost/found pair."""
    lost_item_id: UUID
    found_item_id: UUID
    rejected_by: UUID
    reason: Optional[str]
    details: Optional[str]
    created_at: Optional[datetime]


class RejectedPairListResponse(BaseModel):
    items: List[RejectedPairSchema]
    total: int


class UserRejectionStatsSchema(BaseModel):
    """Per-user rejection counters and abuse flags."""
    user_id: UUID
    total_rejections: int
    high_score_rejections: int
    total_acceptances: int
    suspicious_flag: bool
    rewards_disabled: bool


class SuspiciousUserListResponse(BaseModel):
    items: List[UserRejectionStatsSchema]
    total: int
