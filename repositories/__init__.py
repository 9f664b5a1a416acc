"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.household_repository import (
    HouseholdRepository,
    UserRepository,
    MemberRepository,
)
from repositories.chore_repository import (
    ChoreRepository,
    ChoreCompletionRepository,
    ReminderRepository,
    CalendarEventRepository,
)
from repositories.meal_plan_repository import RecipeRepository, MealPlanRepository
from repositories.shopping_repository import (
    ShoppingListRepository,
    ShoppingItemRepository,
)
from repositories.ai_repository import (
    SuggestionRepository,
    CorrectionRepository,
    PatternRepository,
    HouseholdProfileRepository,
    LearningRuleRepository,
)

__all__ = [
    "BaseRepository",
    "HouseholdRepository",
    "UserRepository",
    "MemberRepository",
    "ChoreRepository",
    "ChoreCompletionRepository",
    "ReminderRepository",
    "CalendarEventRepository",
    "RecipeRepository",
    "MealPlanRepository",
    "ShoppingListRepository",
    "ShoppingItemRepository",
    "SuggestionRepository",
    "CorrectionRepository",
    "PatternRepository",
    "HouseholdProfileRepository",
    "LearningRuleRepository",
]
