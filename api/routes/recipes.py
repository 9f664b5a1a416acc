"""Recipe routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_current_user_id
from api.responses import HOUSEHOLD_ERRORS
from domain.schemas.meal_schemas import RecipeCreate, RecipeUpdate, RecipeResponse
from services.recipe_service import RecipeService

router = APIRouter(prefix="/recipes", tags=["Recipes"], responses=HOUSEHOLD_ERRORS)
logger = logging.getLogger("homehub.api.recipes")


@router.get("", response_model=List[RecipeResponse])
def list_recipes(
    household_id: UUID = Query(...),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Recipes of a household, by title"""
    recipes = RecipeService.list_recipes(db, household_id, user_id)
    return [RecipeResponse.model_validate(r) for r in recipes]


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(
    payload: RecipeCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    recipe = RecipeService.create_recipe(db, payload, user_id)
    return RecipeResponse.model_validate(recipe)


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(
    recipe_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return RecipeResponse.model_validate(RecipeService.get_recipe(db, recipe_id, user_id))


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: UUID,
    payload: RecipeUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    recipe = RecipeService.update_recipe(db, recipe_id, payload, user_id)
    return RecipeResponse.model_validate(recipe)


@router.delete("/{recipe_id}")
def delete_recipe(
    recipe_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    RecipeService.delete_recipe(db, recipe_id, user_id)
    return {"status": "ok", "deleted": str(recipe_id)}
