"""Item repository for database operations"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...domain.matching.errors import InvalidTransitionError, NotFoundError
from ...domain.matching.status import ItemStatus, ItemType, can_transition_item
from ...matching.ports import ItemProfile, ItemStorePort
from ...models.item import Item

logger = logging.getLogger(__name__)


class ItemRepository(ItemStorePort):
    """SQLAlchemy adapter for the item store.

    Each write commits on its own so one failed status update never takes
    other writes of the same batch down with it.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def get_item(self, item_id: UUID) -> Optional[ItemProfile]:
        item = self.db.get(Item, item_id)
        return item.to_profile() if item else None

    def get_active_opposite_type_items(self, item_type: str, community: str) -> List[ItemProfile]:
        """Active items of the other type in the community, oldest first.

        Args:
            item_type: Type of the NEW item ("lost" or "found")
            community: Community to search in

        Returns:
            List of ItemProfile snapshots
        """
        opposite = ItemType(item_type).opposite.value
        query = (
            select(Item)
            .where(
                and_(
                    Item.item_type == opposite,
                    Item.community == community,
                    Item.status == ItemStatus.ACTIVE.value,
                )
            )
            .order_by(Item.created_at, Item.id)
        )
        return [item.to_profile() for item in self.db.execute(query).scalars().all()]

    def set_item_status(self, item_id: UUID, status: ItemStatus) -> None:
        """Move an item to a new status.

        Raises:
            NotFoundError: Item does not exist
            InvalidTransitionError: Transition not allowed (e.g. out of returned)
            SQLAlchemyError: Storage failure (after rollback)
        """
        item = self.db.get(Item, item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")

        current = ItemStatus(item.status)
        if not can_transition_item(current, status):
            raise InvalidTransitionError(
                f"Item {item_id} cannot move from {current.value} to {status.value}"
            )

        if current == status:
            return

        item.status = status.value
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.debug(
            "Item status changed",
            extra={"item_id": str(item_id), "from_status": current.value, "to_status": status.value},
        )
