"""Shopping list and item routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_current_user_id
from api.responses import HOUSEHOLD_ERRORS
from domain.mappers import ShoppingMapper
from domain.schemas.shopping_schemas import (
    ConfirmItemsRequest,
    MergeDuplicatesRequest,
    ShoppingItemCreate,
    ShoppingItemResponse,
    ShoppingItemUpdate,
    ShoppingListCreate,
    ShoppingListResponse,
    ToggleItemRequest,
)
from services.shopping_service import ShoppingService

router = APIRouter(prefix="/shopping-lists", tags=["Shopping"], responses=HOUSEHOLD_ERRORS)
items_router = APIRouter(prefix="/shopping-items", tags=["Shopping"], responses=HOUSEHOLD_ERRORS)
logger = logging.getLogger("homehub.api.shopping")


@router.get("", response_model=List[ShoppingListResponse])
def list_shopping_lists(
    household_id: UUID = Query(...),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Lists of a household with their completion counters"""
    lists = ShoppingService.list_lists(db, household_id, user_id)
    return [ShoppingMapper.to_response(sl, include_items=False) for sl in lists]


@router.post("", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
def create_shopping_list(
    payload: ShoppingListCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    shopping_list = ShoppingService.create_list(db, payload, user_id)
    return ShoppingMapper.to_response(shopping_list)


@router.post("/merge-duplicates")
def merge_duplicates(
    payload: MergeDuplicatesRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Merge incomplete items that share a normalized name"""
    merged = ShoppingService.merge_duplicates(db, payload.list_id, user_id)
    return {"merged": merged}


@router.post("/confirm-items")
def confirm_items(
    payload: ConfirmItemsRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Keep (confirm) or drop (remove) items waiting for confirmation"""
    updated = ShoppingService.confirm_items(db, payload.item_ids, payload.action, user_id)
    return {"updated": updated}


@router.get("/{list_id}", response_model=ShoppingListResponse)
def get_shopping_list(
    list_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return ShoppingMapper.to_response(ShoppingService.get_list(db, list_id, user_id))


@router.delete("/{list_id}")
def delete_shopping_list(
    list_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    ShoppingService.delete_list(db, list_id, user_id)
    return {"status": "ok", "deleted": str(list_id)}


@router.get("/{list_id}/items", response_model=List[ShoppingItemResponse])
def list_items(
    list_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    items = ShoppingService.list_items(db, list_id, user_id)
    return [ShoppingItemResponse.model_validate(i) for i in items]


@router.post(
    "/{list_id}/items",
    response_model=ShoppingItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_item(
    list_id: UUID,
    payload: ShoppingItemCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    item = ShoppingService.add_item(db, list_id, payload, user_id)
    return ShoppingItemResponse.model_validate(item)


@router.patch("/{list_id}/items/{item_id}", response_model=ShoppingItemResponse)
def update_item(
    list_id: UUID,
    item_id: UUID,
    payload: ShoppingItemUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    item = ShoppingService.update_item(db, list_id, item_id, payload, user_id)
    return ShoppingItemResponse.model_validate(item)


@router.delete("/{list_id}/items/{item_id}")
def delete_item(
    list_id: UUID,
    item_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    ShoppingService.delete_item(db, list_id, item_id, user_id)
    return {"status": "ok", "deleted": str(item_id)}


@items_router.post("/toggle", response_model=ShoppingItemResponse)
def toggle_item(
    payload: ToggleItemRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """
    Toggle an item's completion.

    Completing awards the caller XP and a coin; un-completing awards nothing.
    """
    item = ShoppingService.toggle_item(db, payload.item_id, user_id)
    return ShoppingItemResponse.model_validate(item)
