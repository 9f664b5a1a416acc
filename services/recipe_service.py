"""Recipe service"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.models import Recipe
from domain.schemas.meal_schemas import RecipeCreate, RecipeUpdate
from repositories import RecipeRepository
from services.household_service import HouseholdService

logger = logging.getLogger("homehub.recipes")


class RecipeService:
    @staticmethod
    def list_recipes(db: Session, household_id: UUID, user_id: UUID) -> List[Recipe]:
        HouseholdService.require_access(db, user_id, household_id)
        return RecipeRepository(db).get_by_household(household_id, order_by=Recipe.title)

    @staticmethod
    def get_recipe(db: Session, recipe_id: UUID, user_id: UUID) -> Recipe:
        recipe = RecipeRepository(db).get_by_id(recipe_id)
        if not recipe:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        HouseholdService.require_access(db, user_id, recipe.household_id)
        return recipe

    @staticmethod
    def create_recipe(db: Session, payload: RecipeCreate, user_id: UUID) -> Recipe:
        HouseholdService.require_access(db, user_id, payload.household_id)
        data = payload.model_dump()
        data["title"] = payload.title.strip()
        recipe = RecipeRepository(db).create(Recipe(**data, created_by=user_id))
        logger.info(f"Recipe created: {recipe.recipe_id} '{recipe.title}'")
        return recipe

    @staticmethod
    def update_recipe(
        db: Session, recipe_id: UUID, payload: RecipeUpdate, user_id: UUID
    ) -> Recipe:
        recipe = RecipeService.get_recipe(db, recipe_id, user_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(recipe, field, value)
        return RecipeRepository(db).update(recipe)

    @staticmethod
    def delete_recipe(db: Session, recipe_id: UUID, user_id: UUID) -> bool:
        RecipeService.get_recipe(db, recipe_id, user_id)
        deleted = RecipeRepository(db).delete(recipe_id)
        logger.info(f"Recipe deleted: {recipe_id}")
        return deleted
