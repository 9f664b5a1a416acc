"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
    utcnow,
    as_utc_naive,
)
from domain.models.household import Household, AppUser, HouseholdMember
from domain.models.chore import Chore, ChoreCompletion, Reminder, CalendarEvent
from domain.models.meal_plan import Recipe, MealPlan, ShoppingList, ShoppingItem
from domain.models.ai import (
    AISuggestion,
    AICorrection,
    AICorrectionPattern,
    AIHouseholdProfile,
    AILearningRule,
)

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    "utcnow",
    "as_utc_naive",
    # Household models
    "Household",
    "AppUser",
    "HouseholdMember",
    # Chore and schedule models
    "Chore",
    "ChoreCompletion",
    "Reminder",
    "CalendarEvent",
    # Meal plan models
    "Recipe",
    "MealPlan",
    "ShoppingList",
    "ShoppingItem",
    # AI models
    "AISuggestion",
    "AICorrection",
    "AICorrectionPattern",
    "AIHouseholdProfile",
    "AILearningRule",
]
