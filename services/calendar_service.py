"""Calendar event service"""

import logging
from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from domain.models import CalendarEvent, as_utc_naive
from domain.schemas.chore_schemas import CalendarEventCreate
from repositories import CalendarEventRepository
from services.household_service import HouseholdService

logger = logging.getLogger("homehub.calendar")


class CalendarService:
    @staticmethod
    def list_events(
        db: Session, household_id: UUID, user_id: UUID, start: datetime, end: datetime
    ) -> List[CalendarEvent]:
        HouseholdService.require_access(db, user_id, household_id)
        start, end = as_utc_naive(start), as_utc_naive(end)
        if end < start:
            raise ServiceValidationError("end must not be before start")
        return CalendarEventRepository(db).list_in_window(household_id, start, end)

    @staticmethod
    def create_event(db: Session, payload: CalendarEventCreate, user_id: UUID) -> CalendarEvent:
        """Create an event; the window must not end before it starts."""
        HouseholdService.require_access(db, user_id, payload.household_id)

        start_at = as_utc_naive(payload.start_at)
        end_at = as_utc_naive(payload.end_at)
        if end_at < start_at:
            raise ServiceValidationError("end_at must not be before start_at")

        event = CalendarEvent(
            household_id=payload.household_id,
            title=payload.title.strip(),
            description=payload.description,
            start_at=start_at,
            end_at=end_at,
            timezone=payload.timezone,
            is_all_day=payload.is_all_day,
            location=payload.location,
            created_by=user_id,
        )
        event = CalendarEventRepository(db).create(event)
        logger.info(f"Calendar event created: {event.event_id}")
        return event

    @staticmethod
    def delete_event(db: Session, event_id: UUID, user_id: UUID) -> bool:
        repo = CalendarEventRepository(db)
        event = repo.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Calendar event {event_id} not found")
        HouseholdService.require_access(db, user_id, event.household_id)
        return repo.delete(event_id)
