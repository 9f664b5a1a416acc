"""
Shopping list domain mappers.
Handles transformation between ORM models and DTOs for shopping-related entities.
"""

from domain.models import ShoppingList
from domain.schemas.shopping_schemas import (
    ShoppingListResponse,
    ShoppingItemResponse,
)


class ShoppingMapper:
    """Mapper for shopping list transformations."""

    @staticmethod
    def to_response(
        shopping_list: ShoppingList, include_items: bool = True
    ) -> ShoppingListResponse:
        """
        Convert ORM ShoppingList to ShoppingListResponse DTO.

        Completion counters are derived from the loaded items: a list is
        complete only when it has items and every one of them is checked off.

        Args:
            shopping_list: ShoppingList ORM instance with items loaded
            include_items: Whether to embed the item rows in the response

        Returns:
            ShoppingListResponse DTO with all list data
        """
        items = list(shopping_list.items)
        total = len(items)
        completed = sum(1 for item in items if item.completed)

        return ShoppingListResponse(
            list_id=shopping_list.list_id,
            household_id=shopping_list.household_id,
            title=shopping_list.title,
            description=shopping_list.description,
            created_by=shopping_list.created_by,
            is_default=shopping_list.is_default,
            ai_suggestions_count=shopping_list.ai_suggestions_count or 0,
            ai_confidence=shopping_list.ai_confidence or 0,
            created_at=shopping_list.created_at,
            total_items=total,
            completed_items=completed,
            is_completed=total > 0 and completed == total,
            items=(
                [ShoppingItemResponse.model_validate(i) for i in items]
                if include_items
                else []
            ),
        )
