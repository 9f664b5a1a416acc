"""
Tests for reminders, the cron sender and calendar events.
"""

import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from test_fixtures import auth, client, db_session, home, hours_ago
from app.config import settings
from app.exceptions import ServiceValidationError
from domain.models import Reminder, utcnow
from domain.schemas.chore_schemas import CalendarEventCreate
from services.calendar_service import CalendarService
from services.reminder_service import ReminderService


def _reminder(db: Session, household, title: str, remind_at: datetime, is_sent: bool = False) -> Reminder:
    reminder = Reminder(household_id=household.household_id, title=title, remind_at=remind_at, is_sent=is_sent)
    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    return reminder


# =============================================================================
# REMINDERS
# =============================================================================


def test_send_due_reminders_marks_only_due(db_session: Session, home):
    due = _reminder(db_session, home.household, "Take out recycling", hours_ago(1))
    already = _reminder(db_session, home.household, "Pay rent", hours_ago(5), is_sent=True)
    future = _reminder(db_session, home.household, "Dentist", utcnow() + timedelta(days=1))

    result = ReminderService.send_due_reminders(db_session)

    assert result.success is True
    assert result.sent == 1
    assert result.errors == []

    db_session.expire_all()
    assert db_session.get(Reminder, due.reminder_id).is_sent is True
    assert db_session.get(Reminder, due.reminder_id).sent_at is not None
    assert db_session.get(Reminder, already.reminder_id).sent_at is None
    assert db_session.get(Reminder, future.reminder_id).is_sent is False


def test_send_due_reminders_nothing_due(db_session: Session, home):
    result = ReminderService.send_due_reminders(db_session)
    assert result.sent == 0
    assert result.message == "No reminders to send"


def test_send_twice_sends_once(db_session: Session, home):
    _reminder(db_session, home.household, "Water plants", hours_ago(2))
    assert ReminderService.send_due_reminders(db_session).sent == 1
    assert ReminderService.send_due_reminders(db_session).sent == 0


def test_send_due_reminders_continues_after_failure(db_session: Session, home, monkeypatch):
    """
    Verifies:
    - A reminder whose save fails is rolled back and reported in errors
    - Reminders after it are still sent
    - The run reports success=false
    """
    broken = _reminder(db_session, home.household, "Feed the cat", hours_ago(3))
    later = _reminder(db_session, home.household, "Take out recycling", hours_ago(2))
    last = _reminder(db_session, home.household, "Lock the shed", hours_ago(1))

    real_commit = db_session.commit
    commits = []

    def commit_failing_first():
        commits.append(1)
        if len(commits) == 1:
            raise RuntimeError("connection reset")
        real_commit()

    monkeypatch.setattr(db_session, "commit", commit_failing_first)

    result = ReminderService.send_due_reminders(db_session)

    assert result.success is False
    assert result.sent == 2
    assert len(result.errors) == 1
    assert result.errors[0] == f"{broken.reminder_id}: connection reset"

    db_session.expire_all()
    assert db_session.get(Reminder, broken.reminder_id).is_sent is False
    assert db_session.get(Reminder, later.reminder_id).is_sent is True
    assert db_session.get(Reminder, last.reminder_id).is_sent is True


def test_reminder_endpoints(db_session: Session, home):
    headers = auth(home.member.user_id)
    hid = str(home.household.household_id)
    remind_at = (utcnow() + timedelta(hours=3)).isoformat()

    r = client.post(
        "/api/reminders",
        json={"household_id": hid, "title": "Buy milk", "remind_at": remind_at, "related_type": "chore"},
        headers=headers,
    )
    assert r.status_code == 201
    reminder_id = r.json()["reminder_id"]
    assert r.json()["is_sent"] is False

    r = client.get(f"/api/reminders?household_id={hid}", headers=headers)
    assert [x["title"] for x in r.json()] == ["Buy milk"]

    assert client.delete(f"/api/reminders/{reminder_id}", headers=headers).status_code == 200
    assert client.get(f"/api/reminders?household_id={hid}", headers=headers).json() == []


def test_reminder_outsider_forbidden(db_session: Session, home):
    r = client.get(
        f"/api/reminders?household_id={home.household.household_id}",
        headers=auth(home.outsider.user_id),
    )
    assert r.status_code == 403


def test_cron_without_secret_configured(db_session: Session, home):
    _reminder(db_session, home.household, "Feed the fish", hours_ago(1))
    r = client.post("/api/cron/reminders")
    assert r.status_code == 200
    assert r.json()["sent"] == 1
    assert r.json()["success"] is True


def test_cron_requires_bearer_secret(db_session: Session, home, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "s3cret")

    r = client.post("/api/cron/reminders")
    assert r.status_code == 401

    r = client.post("/api/cron/reminders", headers={"Authorization": "Bearer wrong"})
    assert r.status_code == 401

    r = client.post("/api/cron/reminders", headers={"Authorization": "Bearer s3cret"})
    assert r.status_code == 200


# =============================================================================
# CALENDAR
# =============================================================================


def _event(db: Session, home, title: str, start: datetime, hours: int = 1):
    return CalendarService.create_event(
        db,
        CalendarEventCreate(
            household_id=home.household.household_id,
            title=title,
            start_at=start,
            end_at=start + timedelta(hours=hours),
        ),
        home.owner.user_id,
    )


def test_create_event_rejects_inverted_window(db_session: Session, home):
    start = datetime(2026, 10, 20, 18, 0)
    with pytest.raises(ServiceValidationError):
        CalendarService.create_event(
            db_session,
            CalendarEventCreate(
                household_id=home.household.household_id,
                title="Book club",
                start_at=start,
                end_at=start - timedelta(minutes=1),
            ),
            home.owner.user_id,
        )


def test_list_events_overlapping_window(db_session: Session, home):
    day = datetime(2026, 10, 20)
    _event(db_session, home, "Soccer practice", day.replace(hour=16))
    _event(db_session, home, "Late movie", day.replace(hour=23), hours=3)
    _event(db_session, home, "Next week", day + timedelta(days=7))

    events = CalendarService.list_events(
        db_session, home.household.household_id, home.member.user_id, day, day + timedelta(days=1)
    )
    assert [e.title for e in events] == ["Soccer practice", "Late movie"]


def test_calendar_endpoints(db_session: Session, home):
    headers = auth(home.owner.user_id)
    hid = str(home.household.household_id)
    r = client.post(
        "/api/calendar",
        json={
            "household_id": hid,
            "title": "Parent teacher meeting",
            "start_at": "2026-10-21T17:00:00",
            "end_at": "2026-10-21T18:00:00",
        },
        headers=headers,
    )
    assert r.status_code == 201
    event_id = r.json()["event_id"]

    r = client.get(
        f"/api/calendar?household_id={hid}&start=2026-10-21T00:00:00&end=2026-10-22T00:00:00",
        headers=headers,
    )
    assert [e["event_id"] for e in r.json()] == [event_id]

    assert client.delete(f"/api/calendar/{event_id}", headers=headers).status_code == 200
    assert client.delete(f"/api/calendar/{event_id}", headers=headers).status_code == 404


def test_calendar_endpoint_inverted_window_is_bad_request(db_session: Session, home):
    r = client.get(
        f"/api/calendar?household_id={home.household.household_id}"
        "&start=2026-10-22T00:00:00&end=2026-10-21T00:00:00",
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_calendar_unknown_household_forbidden(db_session: Session, home):
    r = client.get(
        f"/api/calendar?household_id={uuid.uuid4()}&start=2026-10-21T00:00:00&end=2026-10-22T00:00:00",
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 403
