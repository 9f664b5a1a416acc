"""User account routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from api.dependencies import get_db
from domain.schemas.household_schemas import UserCreate, UserResponse
from services.household_service import HouseholdService

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger("homehub.api.users")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """Create a new user account (409 when the email is taken)"""
    new_user = HouseholdService.create_user(db, user.email, user.full_name)
    return UserResponse.model_validate(new_user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    """Get a user, including XP and coin totals"""
    return UserResponse.model_validate(HouseholdService.get_user(db, user_id))
