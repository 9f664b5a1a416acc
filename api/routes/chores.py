"""Chore routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_current_user_id
from api.responses import HOUSEHOLD_ERRORS
from domain.schemas.chore_schemas import (
    ChoreCreate,
    ChoreUpdate,
    ChoreResponse,
    ChoreCompletionCreate,
    ChoreCompletionResponse,
    ChoreAssignRequest,
)
from services.chore_service import ChoreService

router = APIRouter(prefix="/chores", tags=["Chores"], responses=HOUSEHOLD_ERRORS)
logger = logging.getLogger("homehub.api.chores")


@router.get("", response_model=List[ChoreResponse])
def list_chores(
    household_id: UUID = Query(...),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Chores of a household, soonest due first (undated last)"""
    chores = ChoreService.list_chores(db, household_id, user_id)
    return [ChoreResponse.model_validate(c) for c in chores]


@router.post("", response_model=ChoreResponse, status_code=status.HTTP_201_CREATED)
def create_chore(
    payload: ChoreCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    chore = ChoreService.create_chore(db, payload, user_id)
    return ChoreResponse.model_validate(chore)


@router.get("/completions", response_model=List[ChoreCompletionResponse])
def list_completions(
    household_id: UUID = Query(...),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Chore completions of a household, newest first"""
    completions = ChoreService.list_completions(db, household_id, user_id, limit=limit)
    return [ChoreCompletionResponse.model_validate(c) for c in completions]


@router.post(
    "/completions",
    response_model=ChoreCompletionResponse,
    status_code=status.HTTP_201_CREATED,
)
def complete_chore(
    payload: ChoreCompletionCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """
    Complete a chore.

    Records the completion, awards the XP to the caller and marks the chore
    completed.
    """
    completion = ChoreService.complete_chore(db, payload.chore_id, user_id, xp=payload.xp)
    return ChoreCompletionResponse.model_validate(completion)


@router.get("/{chore_id}", response_model=ChoreResponse)
def get_chore(
    chore_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return ChoreResponse.model_validate(ChoreService.get_chore(db, chore_id, user_id))


@router.patch("/{chore_id}", response_model=ChoreResponse)
def update_chore(
    chore_id: UUID,
    payload: ChoreUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Partial update; only fields present in the body change"""
    chore = ChoreService.update_chore(db, chore_id, payload, user_id)
    return ChoreResponse.model_validate(chore)


@router.delete("/{chore_id}")
def delete_chore(
    chore_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    ChoreService.delete_chore(db, chore_id, user_id)
    return {"status": "ok", "deleted": str(chore_id)}


@router.post("/{chore_id}/assign")
def assign_chore(
    chore_id: UUID,
    payload: ChoreAssignRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Pick an assignee among household members with the given strategy"""
    chore, result = ChoreService.assign_chore(db, chore_id, user_id, payload.strategy)
    return {
        "chore": ChoreResponse.model_validate(chore),
        "assignment": result.to_dict(),
    }
