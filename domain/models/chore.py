"""
Chore, reminder and calendar models.
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, Integer, Boolean, Uuid
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base, utcnow, enum_column
from domain.enums import ChorePriority, ChoreStatus, EnergyLevel, ReminderRelatedType


class Chore(Base):
    """Household task assignable to a member"""

    __tablename__ = "chore"

    chore_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    title = Column(Text, nullable=False)
    description = Column(Text)
    assigned_to = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    created_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    due_at = Column(DateTime)
    category = Column(Text)
    priority = Column(
        enum_column(ChorePriority, "chore_priority"),
        nullable=False,
        default=ChorePriority.MEDIUM,
    )
    status = Column(
        enum_column(ChoreStatus, "chore_status"),
        nullable=False,
        default=ChoreStatus.PENDING,
    )
    rrule = Column(Text)  # RFC 5545 recurrence rule, stored verbatim
    ai_difficulty_rating = Column(Integer)
    ai_estimated_duration = Column(Integer)  # minutes
    ai_energy_level = Column(enum_column(EnergyLevel, "energy_level"))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    completions = relationship(
        "ChoreCompletion", back_populates="chore", cascade="all, delete-orphan"
    )


class ChoreCompletion(Base):
    """Record of a member completing a chore"""

    __tablename__ = "chore_completion"

    completion_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    chore_id = Column(
        Uuid, ForeignKey("chore.chore_id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    xp_awarded = Column(Integer, nullable=False, default=10)
    completed_at = Column(DateTime, default=utcnow)

    chore = relationship("Chore", back_populates="completions")


class Reminder(Base):
    """Scheduled reminder about a chore or calendar event"""

    __tablename__ = "reminder"

    reminder_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    title = Column(Text, nullable=False)
    related_type = Column(enum_column(ReminderRelatedType, "reminder_related_type"))
    related_id = Column(Uuid)
    remind_at = Column(DateTime, nullable=False)
    created_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    is_sent = Column(Boolean, nullable=False, default=False)
    sent_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)


class CalendarEvent(Base):
    """Household calendar entry"""

    __tablename__ = "calendar_event"

    event_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    title = Column(Text, nullable=False)
    description = Column(Text)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    timezone = Column(Text, default="UTC")
    is_all_day = Column(Boolean, nullable=False, default=False)
    location = Column(Text)
    created_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    created_at = Column(DateTime, default=utcnow)
