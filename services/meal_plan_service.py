"""Weekly meal planner service"""

import copy
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.enums import MealSlot, WeekDay
from domain.models import MealPlan
from repositories import MealPlanRepository, RecipeRepository
from services.household_service import HouseholdService
from services.shopping_service import ShoppingService

logger = logging.getLogger("homehub.meal_planner")

DAYS = [d.value for d in WeekDay]
SLOTS = [s.value for s in MealSlot]


def empty_week() -> Dict[str, Dict[str, Optional[str]]]:
    """Seven days with every slot empty."""
    return {day: {slot: None for slot in SLOTS} for day in DAYS}


def normalize_meals(meals: Optional[Dict[Any, Any]]) -> Dict[str, Dict[str, Optional[str]]]:
    """Fill missing days/slots and store recipe ids as strings (JSON column)."""
    week = empty_week()
    for day, slots in (meals or {}).items():
        day_key = day.value if isinstance(day, WeekDay) else str(day)
        if day_key not in week or not slots:
            continue
        for slot, recipe_id in slots.items():
            slot_key = slot.value if isinstance(slot, MealSlot) else str(slot)
            if slot_key in week[day_key]:
                week[day_key][slot_key] = str(recipe_id) if recipe_id else None
    return week


def recipe_ids_in(meals: Dict[str, Dict[str, Optional[str]]]) -> List[UUID]:
    """Distinct recipe ids referenced by a week, in day/slot order."""
    seen: List[UUID] = []
    for day in DAYS:
        for slot in SLOTS:
            value = (meals.get(day) or {}).get(slot)
            if value:
                recipe_id = UUID(str(value))
                if recipe_id not in seen:
                    seen.append(recipe_id)
    return seen


class MealPlanService:
    """Business logic for weekly meal plans."""

    @staticmethod
    def get_week(db: Session, household_id: UUID, week_start: date, user_id: UUID) -> Dict[str, Any]:
        """Return the stored week, or an empty skeleton when none exists."""
        HouseholdService.require_access(db, user_id, household_id)
        plan = MealPlanRepository(db).get_for_week(household_id, week_start)
        if not plan:
            return {
                "plan_id": None,
                "household_id": household_id,
                "week_start_date": week_start,
                "meals": empty_week(),
                "updated_at": None,
            }
        return {
            "plan_id": plan.plan_id,
            "household_id": plan.household_id,
            "week_start_date": plan.week_start_date,
            "meals": normalize_meals(plan.meals),
            "updated_at": plan.updated_at,
        }

    @staticmethod
    def _upsert(db: Session, household_id: UUID, week_start: date, meals: Dict) -> MealPlan:
        repo = MealPlanRepository(db)
        plan = repo.get_for_week(household_id, week_start)
        if plan:
            plan.meals = meals
            return repo.update(plan)
        return repo.create(
            MealPlan(household_id=household_id, week_start_date=week_start, meals=meals)
        )

    @staticmethod
    def save_week(
        db: Session, household_id: UUID, week_start: date, meals: Dict, user_id: UUID
    ) -> MealPlan:
        HouseholdService.require_access(db, user_id, household_id)
        plan = MealPlanService._upsert(db, household_id, week_start, normalize_meals(meals))
        logger.info(f"Meal plan saved: household {household_id} week {week_start}")
        return plan

    @staticmethod
    def assign_slot(
        db: Session,
        household_id: UUID,
        week_start: date,
        day: WeekDay,
        slot: MealSlot,
        recipe_id: Optional[UUID],
        user_id: UUID,
        also_add_to_list: bool = False,
        auto_confirm: bool = False,
    ) -> Dict[str, Any]:
        """
        Put a recipe (or nothing) into one day/slot, creating the week if needed.

        When also_add_to_list is set the recipe's ingredients are merged into
        the household's default shopping list.

        Returns:
            {"plan": MealPlan, "shopping": result of the list update or None}
        """
        HouseholdService.require_access(db, user_id, household_id)

        if recipe_id and not RecipeRepository(db).get_by_id_and_household(recipe_id, household_id):
            raise NotFoundError(f"Recipe {recipe_id} not found in household {household_id}")

        existing = MealPlanRepository(db).get_for_week(household_id, week_start)
        meals = normalize_meals(existing.meals if existing else None)
        meals[day.value][slot.value] = str(recipe_id) if recipe_id else None
        plan = MealPlanService._upsert(db, household_id, week_start, meals)

        shopping = None
        if also_add_to_list and recipe_id:
            shopping = ShoppingService.add_recipe_ingredients(
                db, household_id, user_id, recipe_id, auto_confirm=auto_confirm
            )

        logger.info(
            f"Assigned recipe {recipe_id} to {day.value}/{slot.value} "
            f"for household {household_id} week {week_start}"
        )
        return {"plan": plan, "shopping": shopping}

    @staticmethod
    def clear_week(db: Session, household_id: UUID, week_start: date, user_id: UUID) -> MealPlan:
        HouseholdService.require_access(db, user_id, household_id)
        repo = MealPlanRepository(db)
        plan = repo.get_for_week(household_id, week_start)
        if not plan:
            raise NotFoundError(f"No meal plan for week {week_start}")
        plan.meals = empty_week()
        logger.info(f"Meal plan cleared: household {household_id} week {week_start}")
        return repo.update(plan)

    @staticmethod
    def copy_week(
        db: Session, household_id: UUID, from_week: date, to_week: date, user_id: UUID
    ) -> MealPlan:
        HouseholdService.require_access(db, user_id, household_id)
        source = MealPlanRepository(db).get_for_week(household_id, from_week)
        if not source:
            raise NotFoundError(f"No meal plan for week {from_week}")
        meals = copy.deepcopy(normalize_meals(source.meals))
        plan = MealPlanService._upsert(db, household_id, to_week, meals)
        logger.info(f"Meal plan copied: {from_week} -> {to_week} (household {household_id})")
        return plan

    @staticmethod
    def add_week_ingredients(
        db: Session,
        household_id: UUID,
        week_start: date,
        user_id: UUID,
        auto_confirm: bool = False,
    ) -> Dict[str, Any]:
        """Add the ingredients of every recipe planned this week to the default list."""
        HouseholdService.require_access(db, user_id, household_id)
        plan = MealPlanRepository(db).get_for_week(household_id, week_start)
        if not plan:
            raise NotFoundError(f"No meal plan for week {week_start}")

        added = 0
        updated = 0
        list_id = None
        recipes = 0
        for recipe_id in recipe_ids_in(normalize_meals(plan.meals)):
            try:
                result = ShoppingService.add_recipe_ingredients(
                    db, household_id, user_id, recipe_id, auto_confirm=auto_confirm
                )
            except NotFoundError:
                logger.warning(f"Skipping missing recipe {recipe_id} in week {week_start}")
                continue
            recipes += 1
            added += result["added"]
            updated += result["updated"]
            list_id = result["list_id"]

        return {"list_id": list_id, "recipes": recipes, "added": added, "updated": updated}
