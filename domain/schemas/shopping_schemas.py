from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime
from uuid import UUID


class ShoppingListCreate(BaseModel):
    """Schema for creating a shopping list"""

    household_id: UUID
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_default: bool = False


class ShoppingItemCreate(BaseModel):
    """Schema for adding an item to a list"""

    name: str = Field(..., min_length=1, max_length=100)
    quantity: Optional[str] = Field(None, max_length=50)
    category: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)


class ShoppingItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[str] = Field(None, max_length=50)
    category: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)
    completed: Optional[bool] = None


class ShoppingItemResponse(BaseModel):
    item_id: UUID
    list_id: UUID
    name: str
    quantity: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    completed: bool
    completed_by: Optional[UUID] = None
    completed_at: Optional[datetime] = None
    auto_added: bool = False
    pending_confirmation: bool = False
    source_recipe_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ShoppingListResponse(BaseModel):
    list_id: UUID
    household_id: UUID
    title: str
    description: Optional[str] = None
    created_by: Optional[UUID] = None
    is_default: bool
    ai_suggestions_count: int
    ai_confidence: int
    created_at: Optional[datetime] = None
    total_items: int
    completed_items: int
    is_completed: bool
    items: List[ShoppingItemResponse] = []


class ToggleItemRequest(BaseModel):
    item_id: UUID


class MergeDuplicatesRequest(BaseModel):
    list_id: UUID


class ConfirmItemsRequest(BaseModel):
    item_ids: List[UUID] = Field(..., min_length=1)
    action: Literal["confirm", "remove"]


class RecipeIngredientsResult(BaseModel):
    """Outcome of adding recipe ingredients to the default list"""

    list_id: UUID
    added: int
    updated: int
    items: List[ShoppingItemResponse] = []
