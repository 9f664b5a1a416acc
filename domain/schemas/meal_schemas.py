from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import MealSlot, WeekDay


# =============================================================================
# Recipes
# =============================================================================


class RecipeIngredient(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: Optional[Union[float, str]] = None
    unit: Optional[str] = Field(None, max_length=20)


class RecipeCreate(BaseModel):
    household_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    ingredients: List[RecipeIngredient] = Field(..., min_length=1)
    instructions: List[str] = Field(default_factory=list)
    prep_time: Optional[int] = Field(None, ge=0, description="Minutes")
    cook_time: Optional[int] = Field(None, ge=0, description="Minutes")
    servings: int = Field(default=1, ge=1, le=100)
    tags: List[str] = Field(default_factory=list)


class RecipeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    ingredients: Optional[List[RecipeIngredient]] = Field(None, min_length=1)
    instructions: Optional[List[str]] = None
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1, le=100)
    tags: Optional[List[str]] = None


class RecipeResponse(BaseModel):
    recipe_id: UUID
    household_id: UUID
    title: str
    description: Optional[str] = None
    ingredients: List[RecipeIngredient]
    instructions: List[str] = []
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None
    tags: List[str] = []
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# =============================================================================
# Meal planner
# =============================================================================

# day -> slot -> recipe id (or None)
WeekMeals = Dict[WeekDay, Dict[MealSlot, Optional[UUID]]]


class MealPlanUpsert(BaseModel):
    household_id: UUID
    week_start_date: date
    meals: WeekMeals


class MealPlanResponse(BaseModel):
    plan_id: Optional[UUID] = None
    household_id: UUID
    week_start_date: date
    meals: Dict[str, Dict[str, Optional[str]]]
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MealAssignRequest(BaseModel):
    household_id: UUID
    week: date
    day: WeekDay
    slot: MealSlot
    recipe_id: Optional[UUID] = None
    also_add_to_list: bool = False
    auto_confirm: bool = False


class MealWeekRequest(BaseModel):
    """Request addressing one week of a household's plan (clear, add ingredients)"""

    household_id: UUID
    week: date
    auto_confirm: bool = False


class MealCopyRequest(BaseModel):
    household_id: UUID
    from_week: date
    to_week: date
