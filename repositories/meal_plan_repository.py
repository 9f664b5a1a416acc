"""
Meal Plan Repository - Data access layer for recipes and weekly meal plans
"""

from datetime import date
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import MealPlan, Recipe


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for recipe data access"""

    def __init__(self, db: Session):
        super().__init__(db, Recipe)

    def get_by_id_and_household(
        self, recipe_id: UUID, household_id: UUID
    ) -> Optional[Recipe]:
        """Get recipe by ID scoped to a household"""
        return (
            self.db.query(Recipe)
            .filter(Recipe.recipe_id == recipe_id, Recipe.household_id == household_id)
            .first()
        )

    def get_many(self, recipe_ids: List[UUID]) -> List[Recipe]:
        """Get recipes by IDs, ignoring unknown ones"""
        if not recipe_ids:
            return []
        return self.db.query(Recipe).filter(Recipe.recipe_id.in_(recipe_ids)).all()


class MealPlanRepository(BaseRepository[MealPlan]):
    """Repository for meal plan data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlan)

    def get_for_week(self, household_id: UUID, week_start: date) -> Optional[MealPlan]:
        """Get a household's plan for the week starting on week_start"""
        return (
            self.db.query(MealPlan)
            .filter(
                MealPlan.household_id == household_id,
                MealPlan.week_start_date == week_start,
            )
            .first()
        )

    def get_recent(self, household_id: UUID, limit: int = 10) -> List[MealPlan]:
        """Most recent plans first"""
        return (
            self.db.query(MealPlan)
            .filter(MealPlan.household_id == household_id)
            .order_by(MealPlan.week_start_date.desc())
            .limit(limit)
            .all()
        )
