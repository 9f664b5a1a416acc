"""
Schemas for AI endpoints and the responses produced by AI services.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime
from uuid import UUID

from domain.enums import CorrectionType, EnergyLevel, UserFeedback

AIProvider = Literal["openai", "mock", "disabled", "error"]
AIRequestType = Literal[
    "shopping_suggestions", "meal_planning", "chore_assignment", "email_processing"
]


class AIResponse(BaseModel):
    """Result envelope for every AI call, real or mocked"""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    provider: AIProvider
    processing_time: float = Field(0.0, description="Milliseconds")
    fallback_used: bool = False


# =============================================================================
# Suggestions
# =============================================================================


class ShoppingSuggestionRequest(BaseModel):
    household_id: UUID
    recent_purchases: List[str] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(default_factory=list)
    budget: Optional[float] = Field(None, ge=0)
    season: Optional[str] = None
    special_occasions: List[str] = Field(default_factory=list)


class MealSuggestionRequest(BaseModel):
    household_id: UUID
    meal_type: str = "dinner"
    dietary_restrictions: List[str] = Field(default_factory=list)
    max_prep_time: int = Field(default=30, ge=1)
    servings: int = Field(default=4, ge=1)
    cuisine: str = "any"
    budget: Optional[float] = Field(None, ge=0)
    skill_level: Literal["beginner", "intermediate", "advanced"] = "intermediate"
    available_ingredients: List[str] = Field(default_factory=list)
    avoid_ingredients: List[str] = Field(default_factory=list)
    special_occasions: List[str] = Field(default_factory=list)


class SuggestionResponse(AIResponse):
    """AI response plus the stored suggestion row, when one was saved"""

    suggestion_id: Optional[UUID] = None


# =============================================================================
# Chore assignment
# =============================================================================


class ChoreSpec(BaseModel):
    """Ad-hoc chore description for assignment without a stored chore"""

    title: str = Field(..., min_length=1, max_length=100)
    category: Optional[str] = None
    ai_difficulty_rating: int = Field(default=50, ge=0, le=100)
    ai_energy_level: Optional[EnergyLevel] = None


class ChoreAssignmentRequest(BaseModel):
    household_id: UUID
    chore_id: Optional[UUID] = None
    chore: Optional[ChoreSpec] = None
    strategy: str = "ai_hybrid"
    recommendations: bool = Field(
        default=False, description="Return the result of every strategy"
    )


# =============================================================================
# Real-time and batch processing
# =============================================================================


class RealtimeRequest(BaseModel):
    type: AIRequestType
    household_id: UUID
    context: Dict[str, Any] = Field(default_factory=dict)
    priority: Literal["low", "medium", "high", "urgent"] = "medium"


class BatchConfigUpdate(BaseModel):
    """Batch settings to change; omitted or null fields keep their current value"""

    model_config = {"extra": "forbid"}

    max_concurrent_requests: Optional[int] = Field(None, ge=1)
    batch_size: Optional[int] = Field(None, ge=1)
    retry_delay: Optional[int] = Field(None, ge=0, description="Milliseconds")
    max_retries: Optional[int] = Field(None, ge=0)
    timeout: Optional[int] = Field(None, ge=1, description="Milliseconds per attempt")
    enable_parallel_processing: Optional[bool] = None
    enable_retry: Optional[bool] = None
    enable_fallback: Optional[bool] = None


class BatchActionRequest(BaseModel):
    action: Literal["create_job", "process_job", "cancel_job", "update_config"]
    name: Optional[str] = None
    description: Optional[str] = None
    requests: List[RealtimeRequest] = Field(default_factory=list)
    job_id: Optional[str] = None
    config: BatchConfigUpdate = Field(default_factory=BatchConfigUpdate)


class RealtimeResponse(AIResponse):
    """AI response tagged with the real-time request it answers"""

    request_id: str


# =============================================================================
# Corrections and learning
# =============================================================================


class CorrectionRequest(BaseModel):
    suggestion_id: UUID
    correction_type: CorrectionType
    correction_data: Dict[str, Any] = Field(default_factory=dict)
    user_notes: str = Field(..., min_length=1, max_length=2000)


class CorrectionResponse(BaseModel):
    correction_id: UUID
    suggestion_id: Optional[UUID] = None
    household_id: UUID
    user_id: Optional[UUID] = None
    correction_type: CorrectionType
    original_suggestion: Optional[Dict[str, Any]] = None
    user_correction: Optional[Dict[str, Any]] = None
    user_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CorrectionResult(BaseModel):
    correction: CorrectionResponse
    user_feedback: UserFeedback
    pattern_type: str
    issue_category: str
    priority: str
    confidence_impact: float
    improvements: List[str]


class SuggestionItem(BaseModel):
    id: Optional[str] = None
    suggestion_type: str
    suggestion_data: Dict[str, Any] = Field(default_factory=dict)


class SuggestionProcessRequest(BaseModel):
    household_id: UUID
    suggestions: List[SuggestionItem] = Field(..., min_length=1)


class SuggestionProcessResult(BaseModel):
    id: Optional[str] = None
    suggestion_type: str
    household_id: UUID
    user_id: UUID
    success: bool
    error: Optional[str] = None
    created_record_id: Optional[UUID] = None
