"""Calendar event routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from datetime import datetime
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_current_user_id
from api.responses import HOUSEHOLD_ERRORS
from domain.schemas.chore_schemas import CalendarEventCreate, CalendarEventResponse
from services.calendar_service import CalendarService

router = APIRouter(prefix="/calendar", tags=["Calendar"], responses=HOUSEHOLD_ERRORS)
logger = logging.getLogger("homehub.api.calendar")


@router.get("", response_model=List[CalendarEventResponse])
def list_events(
    household_id: UUID = Query(...),
    start: datetime = Query(..., description="Window start (ISO 8601)"),
    end: datetime = Query(..., description="Window end (ISO 8601)"),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Events overlapping the [start, end] window, ordered by start time"""
    events = CalendarService.list_events(db, household_id, user_id, start, end)
    return [CalendarEventResponse.model_validate(e) for e in events]


@router.post("", response_model=CalendarEventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: CalendarEventCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    event = CalendarService.create_event(db, payload, user_id)
    return CalendarEventResponse.model_validate(event)


@router.delete("/{event_id}")
def delete_event(
    event_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    CalendarService.delete_event(db, event_id, user_id)
    return {"status": "ok", "deleted": str(event_id)}
