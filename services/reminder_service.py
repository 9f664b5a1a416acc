"""Reminder service: CRUD plus the periodic sender"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.models import Reminder, as_utc_naive, utcnow
from domain.schemas.chore_schemas import ReminderCreate, ReminderSendResult
from repositories import ReminderRepository
from services.household_service import HouseholdService

logger = logging.getLogger("homehub.reminders")


class ReminderService:
    @staticmethod
    def list_reminders(db: Session, household_id: UUID, user_id: UUID) -> List[Reminder]:
        HouseholdService.require_access(db, user_id, household_id)
        return ReminderRepository(db).get_by_household(
            household_id, order_by=Reminder.remind_at
        )

    @staticmethod
    def create_reminder(db: Session, payload: ReminderCreate, user_id: UUID) -> Reminder:
        HouseholdService.require_access(db, user_id, payload.household_id)
        reminder = Reminder(
            household_id=payload.household_id,
            title=payload.title.strip(),
            remind_at=as_utc_naive(payload.remind_at),
            related_type=payload.related_type,
            related_id=payload.related_id,
            created_by=user_id,
        )
        reminder = ReminderRepository(db).create(reminder)
        logger.info(f"Reminder created: {reminder.reminder_id} at {reminder.remind_at}")
        return reminder

    @staticmethod
    def delete_reminder(db: Session, reminder_id: UUID, user_id: UUID) -> bool:
        repo = ReminderRepository(db)
        reminder = repo.get_by_id(reminder_id)
        if not reminder:
            raise NotFoundError(f"Reminder {reminder_id} not found")
        HouseholdService.require_access(db, user_id, reminder.household_id)
        return repo.delete(reminder_id)

    @staticmethod
    def send_due_reminders(
        db: Session, now: Optional[datetime] = None
    ) -> ReminderSendResult:
        """
        Deliver every reminder that is due and not yet sent.

        Delivery is a log line; each reminder is marked sent and committed on
        its own so one failing row does not block the rest.

        Args:
            db: Database session
            now: Reference time (naive UTC); defaults to the current time

        Returns:
            ReminderSendResult with the number sent and per-reminder errors
        """
        now = as_utc_naive(now) or utcnow()
        due = ReminderRepository(db).get_due(now)

        if not due:
            logger.info("No reminders to send")
            return ReminderSendResult(
                success=True, sent=0, errors=[], message="No reminders to send"
            )

        sent = 0
        errors: List[str] = []
        for reminder in due:
            try:
                logger.info(
                    f"Sending reminder {reminder.reminder_id} '{reminder.title}' "
                    f"to household {reminder.household_id}"
                )
                reminder.is_sent = True
                reminder.sent_at = now
                db.commit()
                sent += 1
            except Exception as e:
                db.rollback()
                logger.error(f"Failed to send reminder {reminder.reminder_id}: {e}")
                errors.append(f"{reminder.reminder_id}: {e}")

        logger.info(f"Reminder run finished: sent={sent} errors={len(errors)}")
        return ReminderSendResult(success=not errors, sent=sent, errors=errors)
