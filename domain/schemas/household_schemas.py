from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from domain.enums import MemberRole


class UserCreate(BaseModel):
    """Schema for creating a user account"""

    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    full_name: Optional[str] = Field(None, max_length=200)


class UserResponse(BaseModel):
    user_id: UUID
    email: str
    full_name: Optional[str] = None
    xp: int = 0
    coins: int = 0
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HouseholdCreate(BaseModel):
    """Schema for creating a household; the caller becomes its owner"""

    name: str = Field(..., min_length=1, max_length=100)


class HouseholdResponse(BaseModel):
    household_id: UUID
    name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MemberCreate(BaseModel):
    user_id: UUID
    role: MemberRole = MemberRole.MEMBER


class MemberResponse(BaseModel):
    member_id: UUID
    household_id: UUID
    user_id: UUID
    role: MemberRole
    joined_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
