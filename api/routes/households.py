"""Household and membership routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_current_user_id
from api.responses import HOUSEHOLD_ERRORS
from domain.schemas.household_schemas import (
    HouseholdCreate,
    HouseholdResponse,
    MemberCreate,
    MemberResponse,
)
from services.household_service import HouseholdService

router = APIRouter(prefix="/households", tags=["Households"], responses=HOUSEHOLD_ERRORS)
logger = logging.getLogger("homehub.api.households")


@router.post("", response_model=HouseholdResponse, status_code=status.HTTP_201_CREATED)
def create_household(
    payload: HouseholdCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Create a household; the caller becomes its owner"""
    household = HouseholdService.create_household(db, payload.name, user_id)
    return HouseholdResponse.model_validate(household)


@router.get("/{household_id}/members", response_model=List[MemberResponse])
def list_members(
    household_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    HouseholdService.require_access(db, user_id, household_id)
    members = HouseholdService.list_members(db, household_id)
    return [MemberResponse.model_validate(m) for m in members]


@router.post(
    "/{household_id}/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_member(
    household_id: UUID,
    payload: MemberCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Add a user to the household (owners only)"""
    member = HouseholdService.add_member(
        db, household_id, payload.user_id, payload.role, requested_by=user_id
    )
    return MemberResponse.model_validate(member)
