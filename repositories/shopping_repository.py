"""
Shopping List Repository - Data access layer for shopping list operations
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import ShoppingList, ShoppingItem


class ShoppingListRepository(BaseRepository[ShoppingList]):
    """Repository for shopping list data access"""

    def __init__(self, db: Session):
        super().__init__(db, ShoppingList)

    def get_by_household_id(self, household_id: UUID) -> List[ShoppingList]:
        """Get all shopping lists for a household, newest first"""
        return (
            self.db.query(ShoppingList)
            .filter(ShoppingList.household_id == household_id)
            .order_by(ShoppingList.created_at.desc())
            .all()
        )

    def get_default(self, household_id: UUID) -> Optional[ShoppingList]:
        """Get the household's default list, if any"""
        return (
            self.db.query(ShoppingList)
            .filter(
                ShoppingList.household_id == household_id,
                ShoppingList.is_default.is_(True),
            )
            .first()
        )

    def clear_default(self, household_id: UUID) -> int:
        """Unset the default flag on every list of the household (no commit)"""
        return (
            self.db.query(ShoppingList)
            .filter(
                ShoppingList.household_id == household_id,
                ShoppingList.is_default.is_(True),
            )
            .update({ShoppingList.is_default: False}, synchronize_session="fetch")
        )


class ShoppingItemRepository(BaseRepository[ShoppingItem]):
    """Repository for shopping list item data access"""

    def __init__(self, db: Session):
        super().__init__(db, ShoppingItem)

    def get_by_list(self, list_id: UUID) -> List[ShoppingItem]:
        """Get items of a list in insertion order"""
        return (
            self.db.query(ShoppingItem)
            .filter(ShoppingItem.list_id == list_id)
            .order_by(ShoppingItem.created_at)
            .all()
        )

    def get_incomplete(self, list_id: UUID) -> List[ShoppingItem]:
        """Get items not yet checked off"""
        return (
            self.db.query(ShoppingItem)
            .filter(ShoppingItem.list_id == list_id, ShoppingItem.completed.is_(False))
            .order_by(ShoppingItem.created_at)
            .all()
        )

    def get_many(self, item_ids: List[UUID]) -> List[ShoppingItem]:
        return self.db.query(ShoppingItem).filter(ShoppingItem.item_id.in_(item_ids)).all()

    def get_recent_for_household(self, household_id: UUID, limit: int = 50) -> List[ShoppingItem]:
        """Latest items added to any of the household's lists"""
        return (
            self.db.query(ShoppingItem)
            .join(ShoppingList, ShoppingList.list_id == ShoppingItem.list_id)
            .filter(ShoppingList.household_id == household_id)
            .order_by(ShoppingItem.created_at.desc())
            .limit(limit)
            .all()
        )
