"""Reminder routes and the cron trigger that sends due reminders"""

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, get_current_user_id
from api.responses import HOUSEHOLD_ERRORS
from app.config import settings
from app.exceptions import UnauthorizedError
from domain.schemas.chore_schemas import (
    ReminderCreate,
    ReminderResponse,
    ReminderSendResult,
)
from services.reminder_service import ReminderService

router = APIRouter(prefix="/reminders", tags=["Reminders"], responses=HOUSEHOLD_ERRORS)
cron_router = APIRouter(prefix="/cron", tags=["Cron"])
logger = logging.getLogger("homehub.api.reminders")


@router.get("", response_model=List[ReminderResponse])
def list_reminders(
    household_id: UUID = Query(...),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    reminders = ReminderService.list_reminders(db, household_id, user_id)
    return [ReminderResponse.model_validate(r) for r in reminders]


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
def create_reminder(
    payload: ReminderCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    reminder = ReminderService.create_reminder(db, payload, user_id)
    return ReminderResponse.model_validate(reminder)


@router.delete("/{reminder_id}")
def delete_reminder(
    reminder_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    ReminderService.delete_reminder(db, reminder_id, user_id)
    return {"status": "ok", "deleted": str(reminder_id)}


def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """Require `Authorization: Bearer <CRON_SECRET>` when a secret is configured"""
    if not settings.cron_secret:
        return
    if authorization != f"Bearer {settings.cron_secret}":
        logger.warning("Rejected cron call with missing or wrong bearer token")
        raise UnauthorizedError("Invalid cron credentials")


@cron_router.post(
    "/reminders",
    response_model=ReminderSendResult,
    dependencies=[Depends(verify_cron_secret)],
)
def send_reminders(db: Session = Depends(get_db)):
    """Send every due, unsent reminder"""
    return ReminderService.send_due_reminders(db)
