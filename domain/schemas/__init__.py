"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.household_schemas import (
    UserCreate,
    UserResponse,
    HouseholdCreate,
    HouseholdResponse,
    MemberCreate,
    MemberResponse,
)
from domain.schemas.chore_schemas import (
    ChoreCreate,
    ChoreUpdate,
    ChoreResponse,
    ChoreCompletionCreate,
    ChoreCompletionResponse,
    ChoreAssignRequest,
    ReminderCreate,
    ReminderResponse,
    ReminderSendResult,
    CalendarEventCreate,
    CalendarEventResponse,
)
from domain.schemas.meal_schemas import (
    RecipeIngredient,
    RecipeCreate,
    RecipeUpdate,
    RecipeResponse,
    MealPlanUpsert,
    MealPlanResponse,
    MealAssignRequest,
    MealWeekRequest,
    MealCopyRequest,
)
from domain.schemas.shopping_schemas import (
    ShoppingListCreate,
    ShoppingListResponse,
    ShoppingItemCreate,
    ShoppingItemUpdate,
    ShoppingItemResponse,
    ToggleItemRequest,
    MergeDuplicatesRequest,
    ConfirmItemsRequest,
    RecipeIngredientsResult,
)
from domain.schemas.ai_schemas import (
    AIResponse,
    SuggestionResponse,
    ShoppingSuggestionRequest,
    MealSuggestionRequest,
    ChoreSpec,
    ChoreAssignmentRequest,
    RealtimeRequest,
    BatchConfigUpdate,
    BatchActionRequest,
    RealtimeResponse,
    CorrectionRequest,
    CorrectionResponse,
    CorrectionResult,
    SuggestionItem,
    SuggestionProcessRequest,
    SuggestionProcessResult,
)

__all__ = [
    # Household schemas
    "UserCreate",
    "UserResponse",
    "HouseholdCreate",
    "HouseholdResponse",
    "MemberCreate",
    "MemberResponse",
    # Chore, reminder and calendar schemas
    "ChoreCreate",
    "ChoreUpdate",
    "ChoreResponse",
    "ChoreCompletionCreate",
    "ChoreCompletionResponse",
    "ChoreAssignRequest",
    "ReminderCreate",
    "ReminderResponse",
    "ReminderSendResult",
    "CalendarEventCreate",
    "CalendarEventResponse",
    # Recipe and meal plan schemas
    "RecipeIngredient",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeResponse",
    "MealPlanUpsert",
    "MealPlanResponse",
    "MealAssignRequest",
    "MealWeekRequest",
    "MealCopyRequest",
    # Shopping schemas
    "ShoppingListCreate",
    "ShoppingListResponse",
    "ShoppingItemCreate",
    "ShoppingItemUpdate",
    "ShoppingItemResponse",
    "ToggleItemRequest",
    "MergeDuplicatesRequest",
    "ConfirmItemsRequest",
    "RecipeIngredientsResult",
    # AI schemas
    "AIResponse",
    "SuggestionResponse",
    "ShoppingSuggestionRequest",
    "MealSuggestionRequest",
    "ChoreSpec",
    "ChoreAssignmentRequest",
    "RealtimeRequest",
    "BatchConfigUpdate",
    "BatchActionRequest",
    "RealtimeResponse",
    "CorrectionRequest",
    "CorrectionResponse",
    "CorrectionResult",
    "SuggestionItem",
    "SuggestionProcessRequest",
    "SuggestionProcessResult",
]
