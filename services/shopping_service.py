"""Shopping list service"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from domain.models import AppUser, ShoppingItem, ShoppingList, utcnow
from domain.schemas.shopping_schemas import (
    ShoppingItemCreate,
    ShoppingItemUpdate,
    ShoppingListCreate,
)
from repositories import RecipeRepository, ShoppingItemRepository, ShoppingListRepository
from services.household_service import HouseholdService

logger = logging.getLogger("homehub.shopping")

DEFAULT_LIST_TITLE = "Groceries"
TOGGLE_XP_REWARD = 10
TOGGLE_COIN_REWARD = 1

_QUALIFIERS = (
    "fresh|dried|chopped|diced|minced|ground|whole|canned|frozen|organic|unsalted|salted"
)
_LEADING_QUALIFIER = re.compile(rf"^({_QUALIFIERS})\s+")
_TRAILING_QUALIFIER = re.compile(rf"\s+({_QUALIFIERS})$")
_PARENTHETICAL = re.compile(r"\s*\(.*\)")
_QUANTITY = re.compile(r"^(\d+(\.\d+)?)\s*([a-zA-Z]+)?\s*(.*)$")


# =============================================================================
# Ingredient name and quantity helpers
# =============================================================================


def normalize_name(name: str) -> str:
    """
    Canonical form used to match ingredients against list items.

    "Fresh Onions (red)" and "onion" both normalize to "onion".
    """
    normalized = (name or "").lower().strip()
    normalized = _LEADING_QUALIFIER.sub("", normalized)
    normalized = _TRAILING_QUALIFIER.sub("", normalized)
    normalized = _PARENTHETICAL.sub("", normalized)
    normalized = re.sub(r"\s+", " ", normalized).strip()
    if normalized.endswith("s") and not normalized.endswith("ss"):
        normalized = normalized[:-1]
    return normalized.strip()


@dataclass
class ParsedQuantity:
    amount: Optional[float]
    unit: Optional[str]
    text: str


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else f"{amount:g}"


def parse_quantity(value: Any) -> ParsedQuantity:
    """Parse an {amount, unit} mapping, a number or a string like '2 cups flour'."""
    if isinstance(value, dict):
        try:
            amount = float(value.get("amount"))
        except (TypeError, ValueError):
            amount = None
        unit = str(value.get("unit") or "").strip() or None
        text = " ".join(
            p for p in (_format_amount(amount) if amount is not None else "", unit or "") if p
        )
        return ParsedQuantity(amount, unit.lower() if unit else None, text)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return ParsedQuantity(float(value), None, _format_amount(value))

    text = str(value or "").strip()
    match = _QUANTITY.match(text)
    if match:
        unit = match.group(3)
        return ParsedQuantity(float(match.group(1)), unit.lower() if unit else None, text)
    return ParsedQuantity(None, None, text)


def merge_quantities(current: Optional[str], incoming: Optional[str]) -> str:
    """Sum quantities with the same unit, otherwise join them with ' + '."""
    first = parse_quantity(current)
    second = parse_quantity(incoming)
    if (
        first.amount is not None
        and second.amount is not None
        and first.unit == second.unit
    ):
        total = _format_amount(first.amount + second.amount)
        return f"{total} {first.unit}" if first.unit else total
    return " + ".join(t for t in (first.text, second.text) if t)


def ingredient_name(ingredient: Any) -> str:
    """Item name of a recipe ingredient ({name,...} mapping or '2 cups flour')."""
    if isinstance(ingredient, dict) and ingredient.get("name"):
        return str(ingredient["name"]).strip()
    text = str(ingredient or "").strip()
    match = _QUANTITY.match(text)
    if match and match.group(4):
        return match.group(4).strip()
    return text


class ShoppingService:
    """Business logic for shopping lists and items."""

    # -------------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------------

    @staticmethod
    def list_lists(db: Session, household_id: UUID, user_id: UUID) -> List[ShoppingList]:
        HouseholdService.require_access(db, user_id, household_id)
        return ShoppingListRepository(db).get_by_household_id(household_id)

    @staticmethod
    def get_list(db: Session, list_id: UUID, user_id: UUID) -> ShoppingList:
        shopping_list = ShoppingListRepository(db).get_by_id(list_id)
        if not shopping_list:
            raise NotFoundError(f"Shopping list {list_id} not found")
        HouseholdService.require_access(db, user_id, shopping_list.household_id)
        return shopping_list

    @staticmethod
    def create_list(db: Session, payload: ShoppingListCreate, user_id: UUID) -> ShoppingList:
        """
        Create a list. A new default list demotes the household's previous default,
        keeping at most one default per household.
        """
        HouseholdService.require_access(db, user_id, payload.household_id)
        repo = ShoppingListRepository(db)

        if payload.is_default:
            demoted = repo.clear_default(payload.household_id)
            if demoted:
                logger.info(f"Demoted previous default list in household {payload.household_id}")

        shopping_list = ShoppingList(
            household_id=payload.household_id,
            title=payload.title.strip(),
            description=payload.description,
            created_by=user_id,
            is_default=payload.is_default,
        )
        shopping_list = repo.create(shopping_list)
        logger.info(f"Shopping list created: {shopping_list.list_id}")
        return shopping_list

    @staticmethod
    def delete_list(db: Session, list_id: UUID, user_id: UUID) -> bool:
        ShoppingService.get_list(db, list_id, user_id)
        deleted = ShoppingListRepository(db).delete(list_id)
        if deleted:
            logger.info(f"Shopping list deleted: {list_id}")
        return deleted

    @staticmethod
    def get_or_create_default_list(
        db: Session, household_id: UUID, user_id: Optional[UUID]
    ) -> ShoppingList:
        """
        Return the household's default "Groceries" list, creating it on first use.

        A concurrent creator losing the unique-index race re-reads the winner's row.
        """
        repo = ShoppingListRepository(db)
        existing = repo.get_default(household_id)
        if existing:
            return existing

        shopping_list = ShoppingList(
            household_id=household_id,
            title=DEFAULT_LIST_TITLE,
            created_by=user_id,
            is_default=True,
        )
        try:
            shopping_list = repo.create(shopping_list)
        except IntegrityError:
            db.rollback()
            existing = repo.get_default(household_id)
            if existing is None:
                raise
            return existing

        logger.info(f"Default list created for household {household_id}")
        return shopping_list

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    @staticmethod
    def list_items(db: Session, list_id: UUID, user_id: UUID) -> List[ShoppingItem]:
        ShoppingService.get_list(db, list_id, user_id)
        return ShoppingItemRepository(db).get_by_list(list_id)

    @staticmethod
    def add_item(
        db: Session, list_id: UUID, payload: ShoppingItemCreate, user_id: UUID
    ) -> ShoppingItem:
        ShoppingService.get_list(db, list_id, user_id)
        name = payload.name.strip()
        if not name:
            raise ServiceValidationError("Item name is required")
        item = ShoppingItem(
            list_id=list_id,
            name=name,
            quantity=payload.quantity,
            category=payload.category,
            notes=payload.notes,
        )
        return ShoppingItemRepository(db).create(item)

    @staticmethod
    def _get_item_in_list(db: Session, list_id: UUID, item_id: UUID, user_id: UUID) -> ShoppingItem:
        ShoppingService.get_list(db, list_id, user_id)
        item = ShoppingItemRepository(db).get_by_id(item_id)
        if not item or item.list_id != list_id:
            raise NotFoundError(f"Item {item_id} not found in list {list_id}")
        return item

    @staticmethod
    def update_item(
        db: Session,
        list_id: UUID,
        item_id: UUID,
        payload: ShoppingItemUpdate,
        user_id: UUID,
    ) -> ShoppingItem:
        item = ShoppingService._get_item_in_list(db, list_id, item_id, user_id)
        changes = payload.model_dump(exclude_unset=True)

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ServiceValidationError("Item name is required")
            changes["name"] = name

        completed = changes.pop("completed", None)
        if completed is not None and completed != item.completed:
            item.completed = completed
            item.completed_by = user_id if completed else None
            item.completed_at = utcnow() if completed else None

        for field, value in changes.items():
            setattr(item, field, value)
        return ShoppingItemRepository(db).update(item)

    @staticmethod
    def delete_item(db: Session, list_id: UUID, item_id: UUID, user_id: UUID) -> bool:
        ShoppingService._get_item_in_list(db, list_id, item_id, user_id)
        return ShoppingItemRepository(db).delete(item_id)

    @staticmethod
    def toggle_item(db: Session, item_id: UUID, user_id: UUID) -> ShoppingItem:
        """
        Flip an item's completed flag.

        Completing an item awards the user XP and a coin; un-completing
        clears the completion fields and awards nothing.

        Raises:
            NotFoundError: If the item or user does not exist
            ForbiddenError: If the user is not a member of the list's household
        """
        item = ShoppingItemRepository(db).get_by_id(item_id)
        if not item:
            raise NotFoundError(f"Shopping item {item_id} not found")
        HouseholdService.require_access(db, user_id, item.list.household_id)

        if not item.completed:
            user = db.get(AppUser, user_id)
            if not user:
                raise NotFoundError(f"User {user_id} not found")
            item.completed = True
            item.completed_by = user_id
            item.completed_at = utcnow()
            user.xp = (user.xp or 0) + TOGGLE_XP_REWARD
            user.coins = (user.coins or 0) + TOGGLE_COIN_REWARD
            logger.info(f"Item {item_id} completed by {user_id}, rewards awarded")
        else:
            item.completed = False
            item.completed_by = None
            item.completed_at = None
            logger.info(f"Item {item_id} marked incomplete by {user_id}")

        db.commit()
        db.refresh(item)
        return item

    # -------------------------------------------------------------------------
    # Bulk additions and merging
    # -------------------------------------------------------------------------

    @staticmethod
    def add_to_default_list(
        db: Session,
        household_id: UUID,
        user_id: Optional[UUID],
        entries: Iterable[Dict[str, Any]],
        auto_added: bool = False,
        pending_confirmation: bool = False,
        source_recipe_id: Optional[UUID] = None,
    ) -> Dict[str, Any]:
        """
        Merge entries ({name, quantity, category}) into the default list.

        Entries matching an incomplete item by normalized name update its
        quantity; the rest are inserted.

        Returns:
            {"list_id", "added", "updated", "items"}
        """
        shopping_list = ShoppingService.get_or_create_default_list(db, household_id, user_id)
        existing = {
            normalize_name(item.name): item
            for item in ShoppingItemRepository(db).get_incomplete(shopping_list.list_id)
        }

        added = 0
        updated = 0
        touched: List[ShoppingItem] = []
        for entry in entries:
            name = str(entry.get("name") or "").strip()
            if not name:
                continue
            quantity = entry.get("quantity")
            quantity = parse_quantity(quantity).text if quantity is not None else None

            key = normalize_name(name)
            match = existing.get(key)
            if match:
                match.quantity = merge_quantities(match.quantity, quantity) or None
                updated += 1
                touched.append(match)
                continue

            item = ShoppingItem(
                list_id=shopping_list.list_id,
                name=name,
                quantity=quantity or None,
                category=entry.get("category"),
                notes=entry.get("notes"),
                auto_added=auto_added,
                pending_confirmation=pending_confirmation,
                source_recipe_id=source_recipe_id,
            )
            db.add(item)
            existing[key] = item
            added += 1
            touched.append(item)

        db.commit()
        for item in touched:
            db.refresh(item)

        logger.info(
            f"Default list {shopping_list.list_id}: added={added} updated={updated}"
        )
        return {
            "list_id": shopping_list.list_id,
            "added": added,
            "updated": updated,
            "items": touched,
        }

    @staticmethod
    def add_recipe_ingredients(
        db: Session,
        household_id: UUID,
        user_id: UUID,
        recipe_id: UUID,
        auto_confirm: bool = False,
    ) -> Dict[str, Any]:
        """
        Add a recipe's ingredients to the household's default list.

        Items added this way are flagged auto_added and wait for confirmation
        unless auto_confirm is set.

        Raises:
            NotFoundError: If the recipe does not belong to the household
        """
        recipe = RecipeRepository(db).get_by_id_and_household(recipe_id, household_id)
        if not recipe:
            raise NotFoundError(f"Recipe {recipe_id} not found in household {household_id}")

        entries = []
        for ingredient in recipe.ingredients or []:
            quantity = ingredient if isinstance(ingredient, dict) else parse_quantity(ingredient).text
            entries.append({"name": ingredient_name(ingredient), "quantity": quantity})

        return ShoppingService.add_to_default_list(
            db,
            household_id,
            user_id,
            entries,
            auto_added=True,
            pending_confirmation=not auto_confirm,
            source_recipe_id=recipe.recipe_id,
        )

    @staticmethod
    def merge_duplicates(db: Session, list_id: UUID, user_id: UUID) -> int:
        """
        Collapse incomplete items sharing a normalized name into the oldest one.

        Returns:
            Number of items removed by merging
        """
        ShoppingService.get_list(db, list_id, user_id)
        keep: Dict[str, ShoppingItem] = {}
        merged = 0
        for item in ShoppingItemRepository(db).get_incomplete(list_id):
            key = normalize_name(item.name)
            target = keep.get(key)
            if target is None:
                keep[key] = item
                continue
            target.quantity = merge_quantities(target.quantity, item.quantity) or None
            db.delete(item)
            merged += 1

        db.commit()
        logger.info(f"Merged {merged} duplicate items in list {list_id}")
        return merged

    @staticmethod
    def confirm_items(
        db: Session, item_ids: List[UUID], action: str, user_id: UUID
    ) -> int:
        """Confirm (keep) or remove auto-added items awaiting confirmation."""
        items = ShoppingItemRepository(db).get_many(item_ids)
        if len(items) != len(set(item_ids)):
            raise NotFoundError("One or more items not found")

        for household_id in {item.list.household_id for item in items}:
            HouseholdService.require_access(db, user_id, household_id)

        for item in items:
            if action == "confirm":
                item.pending_confirmation = False
            elif action == "remove":
                db.delete(item)
            else:
                raise ServiceValidationError(f"Unknown action '{action}'")

        db.commit()
        logger.info(f"{action} applied to {len(items)} items")
        return len(items)
