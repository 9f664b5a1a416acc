from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from domain.enums import ChorePriority, ChoreStatus, EnergyLevel, ReminderRelatedType


# =============================================================================
# Chores
# =============================================================================


class ChoreCreate(BaseModel):
    """Schema for creating a chore"""

    household_id: UUID
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    assigned_to: Optional[UUID] = None
    due_at: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=50)
    priority: ChorePriority = ChorePriority.MEDIUM
    rrule: Optional[str] = None
    ai_difficulty_rating: Optional[int] = Field(None, ge=0, le=100)
    ai_estimated_duration: Optional[int] = Field(
        None, ge=0, description="Estimated duration in minutes"
    )
    ai_energy_level: Optional[EnergyLevel] = None


class ChoreUpdate(BaseModel):
    """Partial chore update; only provided fields are changed"""

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    assigned_to: Optional[UUID] = None
    due_at: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=50)
    priority: Optional[ChorePriority] = None
    status: Optional[ChoreStatus] = None
    rrule: Optional[str] = None
    ai_difficulty_rating: Optional[int] = Field(None, ge=0, le=100)
    ai_estimated_duration: Optional[int] = Field(None, ge=0)
    ai_energy_level: Optional[EnergyLevel] = None


class ChoreResponse(BaseModel):
    chore_id: UUID
    household_id: UUID
    title: str
    description: Optional[str] = None
    assigned_to: Optional[UUID] = None
    created_by: Optional[UUID] = None
    due_at: Optional[datetime] = None
    category: Optional[str] = None
    priority: ChorePriority
    status: ChoreStatus
    rrule: Optional[str] = None
    ai_difficulty_rating: Optional[int] = None
    ai_estimated_duration: Optional[int] = None
    ai_energy_level: Optional[EnergyLevel] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ChoreCompletionCreate(BaseModel):
    chore_id: UUID
    xp: int = Field(default=10, ge=0, le=1000, description="XP awarded to the user")


class ChoreCompletionResponse(BaseModel):
    completion_id: UUID
    chore_id: UUID
    user_id: UUID
    xp_awarded: int
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ChoreAssignRequest(BaseModel):
    strategy: str = Field(
        default="ai_hybrid",
        description="round_robin, fairness, preference or ai_hybrid",
    )


# =============================================================================
# Reminders
# =============================================================================


class ReminderCreate(BaseModel):
    household_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    remind_at: datetime
    related_type: Optional[ReminderRelatedType] = None
    related_id: Optional[UUID] = None


class ReminderResponse(BaseModel):
    reminder_id: UUID
    household_id: UUID
    title: str
    related_type: Optional[ReminderRelatedType] = None
    related_id: Optional[UUID] = None
    remind_at: datetime
    created_by: Optional[UUID] = None
    is_sent: bool
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReminderSendResult(BaseModel):
    """Outcome of a reminder sending run"""

    success: bool
    sent: int
    errors: List[str] = []
    message: Optional[str] = None


# =============================================================================
# Calendar
# =============================================================================


class CalendarEventCreate(BaseModel):
    household_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    start_at: datetime
    end_at: datetime
    timezone: str = "UTC"
    is_all_day: bool = False
    location: Optional[str] = None


class CalendarEventResponse(BaseModel):
    event_id: UUID
    household_id: UUID
    title: str
    description: Optional[str] = None
    start_at: datetime
    end_at: datetime
    timezone: Optional[str] = None
    is_all_day: bool
    location: Optional[str] = None
    created_by: Optional[UUID] = None

    model_config = {"from_attributes": True}
