"""
AI suggestion and learning models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    Integer,
    Float,
    Boolean,
    JSON,
    Uuid,
)
import uuid

from domain.models.database import Base, utcnow, enum_column
from domain.enums import SuggestionType, UserFeedback, CorrectionType


class AISuggestion(Base):
    """Structured recommendation produced by an AI call or its mock fallback"""

    __tablename__ = "ai_suggestion"

    suggestion_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    suggestion_type = Column(
        enum_column(SuggestionType, "suggestion_type"), nullable=False
    )
    suggestion_data = Column(JSON, nullable=False, default=dict)
    ai_confidence = Column(Integer, default=75)
    user_feedback = Column(
        enum_column(UserFeedback, "user_feedback"),
        nullable=False,
        default=UserFeedback.PENDING,
    )
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class AICorrection(Base):
    """User correction of an AI suggestion"""

    __tablename__ = "ai_correction"

    correction_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    suggestion_id = Column(
        Uuid, ForeignKey("ai_suggestion.suggestion_id", ondelete="CASCADE")
    )
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    correction_type = Column(
        enum_column(CorrectionType, "correction_type"), nullable=False
    )
    original_suggestion = Column(JSON, default=dict)
    user_correction = Column(JSON, default=dict)
    user_notes = Column(Text)
    created_at = Column(DateTime, default=utcnow)


class AICorrectionPattern(Base):
    """Pattern extracted from a correction, consumed by learning rules"""

    __tablename__ = "ai_correction_pattern"

    pattern_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    correction_id = Column(
        Uuid, ForeignKey("ai_correction.correction_id", ondelete="SET NULL")
    )
    pattern_type = Column(Text, nullable=False)
    pattern_data = Column(JSON, nullable=False, default=dict)
    confidence_impact = Column(Float, nullable=False, default=0.1)
    pattern_strength = Column(Integer, nullable=False, default=1)
    is_learned = Column(Boolean, nullable=False, default=False)
    learned_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)


class AIHouseholdProfile(Base):
    """Per-household learning counters"""

    __tablename__ = "ai_household_profile"

    profile_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid,
        ForeignKey("household.household_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    total_corrections = Column(Integer, nullable=False, default=0)
    successful_learnings = Column(Integer, nullable=False, default=0)
    accuracy_improvement = Column(Float, nullable=False, default=0.0)
    confidence_threshold = Column(Integer, nullable=False, default=75)
    email_format_preferences = Column(JSON, default=dict)
    bill_provider_patterns = Column(JSON, default=dict)
    last_learning_update = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)


class AILearningRule(Base):
    """Condition/action rule applied to new correction patterns"""

    __tablename__ = "ai_learning_rule"

    rule_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=True
    )  # NULL = global rule
    rule_name = Column(Text, nullable=False)
    rule_type = Column(Text, nullable=False)
    conditions = Column(JSON, nullable=False, default=dict)
    actions = Column(JSON, nullable=False, default=dict)
    priority = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
