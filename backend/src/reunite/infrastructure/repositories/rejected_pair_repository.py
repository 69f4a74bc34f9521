"""Rejected pair (blacklist) repository"""

import logging
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import select, and_, exists
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...domain.matching.status import ItemType
from ...matching.ports import BlacklistStorePort, RejectedPairRecord, RejectionFeedback
from ...models.rejected_pair import RejectedPair

logger = logging.getLogger(__name__)


class RejectedPairRepository(BlacklistStorePort):
    """SQLAlchemy adapter for the rejected pair blacklist.

    The unique constraint on (lost_item_id, found_item_id) is the
    idempotency guard: a duplicate insert is rolled back to a savepoint and
    reported as "already present".
    """

    def __init__(self, db: Session):
        self.db = db

    def insert_rejected_pair(
        self,
        lost_item_id: UUID,
        found_item_id: UUID,
        user_id: UUID,
        feedback: Optional[RejectionFeedback],
    ) -> bool:
        row = RejectedPair(
            lost_item_id=lost_item_id,
            found_item_id=found_item_id,
            rejected_by=user_id,
            reason=feedback.reason.value if feedback else None,
            details=feedback.details if feedback else None,
        )

        try:
            with self.db.begin_nested():
                self.db.add(row)
            self.db.commit()
        except IntegrityError:
            # Savepoint already rolled back; nothing else pending
            self.db.commit()
            logger.info(
                "Rejected pair already blacklisted",
                extra={"lost_item_id": str(lost_item_id), "found_item_id": str(found_item_id)},
            )
            return False
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return True

    def is_rejected_pair(self, lost_item_id: UUID, found_item_id: UUID) -> bool:
        query = select(
            exists().where(
                and_(
                    RejectedPair.lost_item_id == lost_item_id,
                    RejectedPair.found_item_id == found_item_id,
                )
            )
        )
        return bool(self.db.execute(query).scalar())

    def rejected_partner_ids(self, item_id: UUID, item_type: str) -> Set[UUID]:
        """Ids of items this item must never be matched with again."""
        if ItemType(item_type) == ItemType.LOST:
            query = select(RejectedPair.found_item_id).where(RejectedPair.lost_item_id == item_id)
        else:
            query = select(RejectedPair.lost_item_id).where(RejectedPair.found_item_id == item_id)
        return set(self.db.execute(query).scalars().all())

    def list_rejected_pairs(self, limit: int = 100) -> List[RejectedPairRecord]:
        query = select(RejectedPair).order_by(RejectedPair.created_at.desc()).limit(limit)
        return [row.to_record() for row in self.db.execute(query).scalars().all()]
