"""Match Item Worker - run matching for a newly reported item.

Report submission enqueues this task so the reporter never waits on
scoring. The orchestrator already turns matching errors into a zero count;
only failures to load the item (database unreachable) are retried.
"""

import logging
from typing import Any, Dict
from uuid import UUID

from celery import Task
from sqlalchemy.exc import OperationalError

from ..database import session_scope
from ..dependencies import build_orchestrator
from ..infrastructure.repositories import ItemRepository
from ..observability.request_id import set_request_id
from .celery_app import celery_app

logger = logging.getLogger(__name__)


class MatchItemTask(Task):
    """Base task class for matching with retry configuration.

    Retry policy:
    - Max retries: 3
    - Backoff: Exponential, capped at 5 minutes
    - Retry on: OperationalError (database unreachable)
    """
    autoretry_for = (OperationalError,)
    retry_kwargs = {"max_retries": 3, "countdown": 5}
    retry_backoff = True
    retry_backoff_max = 300
    retry_jitter = True


@celery_app.task(base=MatchItemTask, bind=True, name="matching.match_new_item")
def match_new_item(self: Task, item_id: str) -> Dict[str, Any]:
    """Match a new lost or found item against the opposite pool.

    Args:
        item_id: UUID string of the new item

    Returns:
        Dict with keys:
            - item_id: Item UUID
            - status: 'matched', 'no_matches' or 'not_found'
            - matches_created: Number of matches persisted

    Example:
        >>> match_new_item.delay(item_id=str(item.id))
    """
    if self.request.id:
        set_request_id(self.request.id)

    with session_scope() as session:
        item = ItemRepository(session).get_item(UUID(item_id))
        if item is None:
            logger.warning("Item to match not found", extra={"item_id": item_id})
            return {"item_id": item_id, "status": "not_found", "matches_created": 0}

        created = build_orchestrator(session).match_new_item(item)

        return {
            "item_id": item_id,
            "status": "matched" if created else "no_matches",
            "matches_created": created,
        }
