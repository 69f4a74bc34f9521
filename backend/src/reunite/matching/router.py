"""Matching API endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_lifecycle_service, get_orchestrator
from ..domain.matching.errors import (
    InvalidTransitionError,
    MatchingError,
    NotAPartyError,
    NotFoundError,
    ValidationError,
)
from ..infrastructure.repositories import ItemRepository
from .lifecycle import MatchLifecycleService
from .orchestrator import MatchOrchestrator
from .schemas import MatchActionRequest, MatchListResponse, MatchSchema, RunMatchingResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["matching"])


def to_http_error(exc: MatchingError) -> HTTPException:
    """Map matching errors to HTTP status codes."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, NotAPartyError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, InvalidTransitionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.post("/items/{item_id}/match", response_model=RunMatchingResponse)
def run_matching(
    item_id: UUID,
    db: Session = Depends(get_db),
    orchestrator: MatchOrchestrator = Depends(get_orchestrator),
):
    """Match a newly reported item against the opposite-type pool.

    Matching problems never fail the request; they show up as zero matches.

    Raises:
        HTTPException 404: Item does not exist
    """
    item = ItemRepository(db).get_item(item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {item_id} not found")

    created = orchestrator.match_new_item(item)
    return RunMatchingResponse(item_id=item_id, matches_created=created)


@router.get("/matches", response_model=MatchListResponse)
def list_matches(
    item_id: UUID = Query(..., description="Lost or found item id"),
    lifecycle: MatchLifecycleService = Depends(get_lifecycle_service),
):
    """List matches of an item, best score first."""
    records = lifecycle.matches_for_item(item_id)
    return MatchListResponse(
        items=[MatchSchema.from_record(record) for record in records],
        total=len(records),
    )


@router.post("/matches/{match_id}/accept", response_model=MatchSchema)
def accept_match(
    match_id: UUID,
    request: MatchActionRequest,
    lifecycle: MatchLifecycleService = Depends(get_lifecycle_service),
):
    """Accept a match as owner or finder (role derived from the user)."""
    try:
        record = lifecycle.accept_match(match_id, request.user_id)
    except MatchingError as e:
        raise to_http_error(e)
    return MatchSchema.from_record(record)


@router.post("/matches/{match_id}/confirm-return", response_model=MatchSchema)
def confirm_return(
    match_id: UUID,
    request: MatchActionRequest,
    lifecycle: MatchLifecycleService = Depends(get_lifecycle_service),
):
    """Owner confirms the item was returned."""
    try:
        record = lifecycle.confirm_return(match_id, request.user_id)
    except MatchingError as e:
        raise to_http_error(e)
    return MatchSchema.from_record(record)
