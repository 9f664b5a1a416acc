"""
Chore Repository - Data access for chores, completions, reminders and calendar events
"""

from datetime import datetime
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Chore, ChoreCompletion, Reminder, CalendarEvent


class ChoreRepository(BaseRepository[Chore]):
    """Repository for chore data access"""

    def __init__(self, db: Session):
        super().__init__(db, Chore)

    def list_for_household(self, household_id: UUID) -> List[Chore]:
        """Chores ordered by due date; undated chores come last"""
        return (
            self.db.query(Chore)
            .filter(Chore.household_id == household_id)
            .order_by(Chore.due_at.is_(None), Chore.due_at, Chore.created_at)
            .all()
        )


class ChoreCompletionRepository(BaseRepository[ChoreCompletion]):
    """Repository for chore completion data access"""

    def __init__(self, db: Session):
        super().__init__(db, ChoreCompletion)

    def list_for_household(self, household_id: UUID, limit: int = 100) -> List[ChoreCompletion]:
        """Completions of a household's chores, newest first"""
        return (
            self.db.query(ChoreCompletion)
            .join(Chore, Chore.chore_id == ChoreCompletion.chore_id)
            .filter(Chore.household_id == household_id)
            .order_by(ChoreCompletion.completed_at.desc())
            .limit(limit)
            .all()
        )


class ReminderRepository(BaseRepository[Reminder]):
    """Repository for reminder data access"""

    def __init__(self, db: Session):
        super().__init__(db, Reminder)

    def get_due(self, now: datetime) -> List[Reminder]:
        """Unsent reminders due at or before now, oldest first"""
        return (
            self.db.query(Reminder)
            .filter(Reminder.remind_at <= now, Reminder.is_sent.is_(False))
            .order_by(Reminder.remind_at)
            .all()
        )


class CalendarEventRepository(BaseRepository[CalendarEvent]):
    """Repository for calendar event data access"""

    def __init__(self, db: Session):
        super().__init__(db, CalendarEvent)

    def list_in_window(
        self, household_id: UUID, start: datetime, end: datetime
    ) -> List[CalendarEvent]:
        """Events overlapping [start, end], ordered by start"""
        return (
            self.db.query(CalendarEvent)
            .filter(
                CalendarEvent.household_id == household_id,
                CalendarEvent.start_at <= end,
                CalendarEvent.end_at >= start,
            )
            .order_by(CalendarEvent.start_at)
            .all()
        )
