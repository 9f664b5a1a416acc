"""Weekly meal planner routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from datetime import date
from uuid import UUID

from api.dependencies import get_db, get_current_user_id
from api.responses import HOUSEHOLD_ERRORS
from domain.schemas.meal_schemas import (
    MealAssignRequest,
    MealCopyRequest,
    MealPlanResponse,
    MealPlanUpsert,
    MealWeekRequest,
)
from domain.schemas.shopping_schemas import ShoppingItemResponse
from services.meal_plan_service import MealPlanService

router = APIRouter(prefix="/meal-planner", tags=["Meal Planner"], responses=HOUSEHOLD_ERRORS)
logger = logging.getLogger("homehub.api.meal_planner")


@router.get("", response_model=MealPlanResponse)
def get_week(
    household_id: UUID = Query(...),
    week_start_date: date = Query(..., description="Monday of the week (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """The stored plan for the week, or an empty week when nothing is planned"""
    return MealPlanResponse(**MealPlanService.get_week(db, household_id, week_start_date, user_id))


@router.put("", response_model=MealPlanResponse)
def save_week(
    payload: MealPlanUpsert,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    plan = MealPlanService.save_week(
        db, payload.household_id, payload.week_start_date, payload.meals, user_id
    )
    return MealPlanResponse.model_validate(plan)


@router.post("/assign")
def assign_slot(
    payload: MealAssignRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """
    Assign a recipe to one day/slot of the week (recipe_id null clears it).

    With also_add_to_list the recipe's ingredients go to the default shopping
    list, pending confirmation unless auto_confirm is set.
    """
    result = MealPlanService.assign_slot(
        db,
        payload.household_id,
        payload.week,
        payload.day,
        payload.slot,
        payload.recipe_id,
        user_id,
        also_add_to_list=payload.also_add_to_list,
        auto_confirm=payload.auto_confirm,
    )
    shopping = result["shopping"]
    return {
        "plan": MealPlanResponse.model_validate(result["plan"]),
        "shopping": (
            {
                "list_id": shopping["list_id"],
                "added": shopping["added"],
                "updated": shopping["updated"],
                "items": [ShoppingItemResponse.model_validate(i) for i in shopping["items"]],
            }
            if shopping
            else None
        ),
    }


@router.post("/clear", response_model=MealPlanResponse)
def clear_week(
    payload: MealWeekRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    plan = MealPlanService.clear_week(db, payload.household_id, payload.week, user_id)
    return MealPlanResponse.model_validate(plan)


@router.post("/copy", response_model=MealPlanResponse)
def copy_week(
    payload: MealCopyRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Copy one week's plan over another, replacing the target week"""
    plan = MealPlanService.copy_week(
        db, payload.household_id, payload.from_week, payload.to_week, user_id
    )
    return MealPlanResponse.model_validate(plan)


@router.post("/add-week-ingredients")
def add_week_ingredients(
    payload: MealWeekRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return MealPlanService.add_week_ingredients(
        db, payload.household_id, payload.week, user_id, auto_confirm=payload.auto_confirm
    )
