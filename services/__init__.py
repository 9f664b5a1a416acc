"""Services package - Business logic layer"""

from services.household_service import HouseholdService
from services.chore_service import ChoreService
from services.reminder_service import ReminderService
from services.calendar_service import CalendarService
from services.recipe_service import RecipeService
from services.meal_plan_service import MealPlanService
from services.shopping_service import ShoppingService

# AI services live in services.ai and are imported from there

__all__ = [
    "HouseholdService",
    "ChoreService",
    "ReminderService",
    "CalendarService",
    "RecipeService",
    "MealPlanService",
    "ShoppingService",
]
