"""Rejection and admin API endpoints."""

import logging
from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..dependencies import get_rejection_service
from ..domain.matching.errors import MatchingError
from ..domain.matching.status import RejectionReason
from ..matching.ports import RejectionFeedback
from ..matching.router import to_http_error
from ..matching.schemas import MatchSchema
from .schemas import (
    RejectMatchRequest,
    RejectMatchResponse,
    RejectedPairListResponse,
    RejectedPairSchema,
    SuspiciousUserListResponse,
    UserRejectionStatsSchema,
)
from .service import RejectionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["rejection"])
admin_router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

VALID_REASONS = {reason.value for reason in RejectionReason}


@router.post("/matches/{match_id}/reject", response_model=RejectMatchResponse)
def reject_match(
    match_id: UUID,
    request: RejectMatchRequest,
    service: RejectionService = Depends(get_rejection_service),
):
    """Reject a match and blacklist the pair.

    Repeating the call for an already rejected match succeeds again.

    Raises:
        HTTPException 400: Unknown rejection reason
        HTTPException 403: User is not a party to the match
        HTTPException 404: Match does not exist
    """
    feedback = None
    if request.feedback is not None:
        if request.feedback.reason not in VALID_REASONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid rejection reason: {request.feedback.reason}",
            )
        feedback = RejectionFeedback(
            reason=RejectionReason(request.feedback.reason),
            details=request.feedback.details,
        )

    try:
        result = service.reject_match(match_id, request.user_id, feedback)
    except MatchingError as e:
        raise to_http_error(e)

    return RejectMatchResponse(
        success=result.success,
        message="Match rejected successfully",
        already_rejected=result.already_rejected,
        next_match=MatchSchema.from_record(result.next_match) if result.next_match else None,
    )


@admin_router.get("/rejected-pairs", response_model=RejectedPairListResponse)
def list_rejected_pairs(
    limit: int = Query(100, ge=1, le=1000),
    service: RejectionService = Depends(get_rejection_service),
):
    """Most recent blacklisted pairs."""
    pairs = service.list_rejected_pairs(limit)
    return RejectedPairListResponse(
        items=[RejectedPairSchema(**asdict(pair)) for pair in pairs],
        total=len(pairs),
    )


@admin_router.get("/suspicious-users", response_model=SuspiciousUserListResponse)
def list_suspicious_users(service: RejectionService = Depends(get_rejection_service)):
    """Users currently carrying the suspicious flag."""
    users = service.list_suspicious_users()
    return SuspiciousUserListResponse(
        items=[UserRejectionStatsSchema(**asdict(stats)) for stats in users],
        total=len(users),
    )


@admin_router.get("/users/{user_id}/rejection-stats", response_model=UserRejectionStatsSchema)
def get_user_rejection_stats(user_id: UUID, service: RejectionService = Depends(get_rejection_service)):
    stats = service.get_user_stats(user_id)
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No stats for user {user_id}")
    return UserRejectionStatsSchema(**asdict(stats))
