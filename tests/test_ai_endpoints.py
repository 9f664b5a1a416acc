"""
HTTP-level tests for the /api/ai routes.

No OpenAI key is configured in tests, so suggestion features answer from
their mock fallbacks.
"""

import uuid

import pytest
from sqlalchemy.orm import Session

from test_fixtures import auth, client, create_chore, create_household, create_recipe, db_session, home
from domain.enums import SuggestionType
from domain.models import AISuggestion, CalendarEvent, Chore, ShoppingItem
from services.ai.batch import BatchConfig, batch_processor
from services.ai.config import MEAL_PLANNING, SHOPPING_SUGGESTIONS, ai_config_manager


# =============================================================================
# SUGGESTIONS
# =============================================================================


def test_shopping_suggestions_are_stored(db_session: Session, home):
    r = client.post(
        "/api/ai/shopping-suggestions",
        json={"household_id": str(home.household.household_id), "budget": 120},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["provider"] == "mock"
    assert body["fallback_used"] is True
    assert body["suggestion_id"]

    suggestion = db_session.query(AISuggestion).one()
    assert str(suggestion.suggestion_id) == body["suggestion_id"]
    assert suggestion.suggestion_type == SuggestionType.SHOPPING_LIST_UPDATE
    assert suggestion.ai_confidence == 75
    assert suggestion.suggestion_data["items"][0]["name"] == "Milk"


def test_disabled_suggestions_are_not_stored(db_session: Session, home):
    ai_config_manager.disable_feature(SHOPPING_SUGGESTIONS)
    r = client.post(
        "/api/ai/shopping-suggestions",
        json={"household_id": str(home.household.household_id)},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 200
    assert r.json()["success"] is False
    assert r.json()["provider"] == "disabled"
    assert r.json()["suggestion_id"] is None
    assert db_session.query(AISuggestion).count() == 0


def test_meal_suggestions(db_session: Session, home):
    create_recipe(db_session, home.household)
    r = client.post(
        "/api/ai/meal-suggestions",
        json={"household_id": str(home.household.household_id), "servings": 2},
        headers=auth(home.member.user_id),
    )
    body = r.json()
    assert body["success"] is True
    assert body["data"][0]["servings"] == 2
    assert db_session.query(AISuggestion).one().suggestion_type == SuggestionType.MEAL_SUGGESTION


def test_suggestions_forbidden_for_outsider(db_session: Session, home):
    r = client.post(
        "/api/ai/meal-suggestions",
        json={"household_id": str(home.household.household_id)},
        headers=auth(home.outsider.user_id),
    )
    assert r.status_code == 403


# =============================================================================
# CHORE ASSIGNMENT
# =============================================================================


def test_chore_assignment_for_ad_hoc_chore(db_session: Session, home):
    r = client.post(
        "/api/ai/chore-assignment",
        json={
            "household_id": str(home.household.household_id),
            "chore": {"title": "Mow lawn", "category": "garden"},
            "strategy": "fairness",
            "recommendations": True,
        },
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 200
    body = r.json()
    assert body["assignment"]["strategy"] == "fairness"
    assert body["assignment"]["assigned_user_id"] in {str(home.owner.user_id), str(home.member.user_id)}
    assert len(body["recommendations"]) == 4
    # nothing is persisted
    assert db_session.query(Chore).count() == 0


def test_chore_assignment_for_stored_chore(db_session: Session, home):
    chore = create_chore(db_session, home.household, "Clean fridge")
    r = client.post(
        "/api/ai/chore-assignment",
        json={"household_id": str(home.household.household_id), "chore_id": str(chore.chore_id)},
        headers=auth(home.owner.user_id),
    )
    assert r.json()["assignment"]["strategy"] == "ai_hybrid"
    assert "recommendations" not in r.json()


def test_chore_assignment_chore_from_other_household(db_session: Session, home):
    other = create_household(db_session, home.outsider, "Johnson Flat")
    chore = create_chore(db_session, other, "Not yours")
    r = client.post(
        "/api/ai/chore-assignment",
        json={"household_id": str(home.household.household_id), "chore_id": str(chore.chore_id)},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 404


def test_chore_assignment_requires_a_chore(db_session: Session, home):
    r = client.post(
        "/api/ai/chore-assignment",
        json={"household_id": str(home.household.household_id)},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 400


# =============================================================================
# APPLYING SUGGESTIONS
# =============================================================================


def test_process_suggestions_creates_records(db_session: Session, home):
    r = client.post(
        "/api/ai/suggestions/process",
        json={
            "household_id": str(home.household.household_id),
            "suggestions": [
                {
                    "id": "s1",
                    "suggestion_type": "calendar_event",
                    "suggestion_data": {"event_title": "Vet visit", "event_date": "2026-10-22T10:00:00Z"},
                },
                {
                    "id": "s2",
                    "suggestion_type": "shopping_list_update",
                    "suggestion_data": {"items": ["Milk", {"name": "Eggs", "quantity": "12"}]},
                },
                {"id": "s3", "suggestion_type": "chore_creation", "suggestion_data": {"title": "Clean gutters"}},
                {"id": "s4", "suggestion_type": "bill_action", "suggestion_data": {}},
                {"id": "s5", "suggestion_type": "calendar_event", "suggestion_data": {"event_title": "No date"}},
            ],
        },
        headers=auth(home.member.user_id),
    )
    assert r.status_code == 200
    body = r.json()
    assert (body["successful"], body["failed"]) == (3, 2)
    assert [x["success"] for x in body["results"]] == [True, True, True, False, False]
    assert "Unsupported suggestion type" in body["results"][3]["error"]

    db_session.expire_all()
    event = db_session.query(CalendarEvent).one()
    assert event.title == "Vet visit"
    assert (event.end_at - event.start_at).total_seconds() == 3600

    items = {i.name: i for i in db_session.query(ShoppingItem).all()}
    assert items["Milk"].quantity == "1"
    assert items["Eggs"].quantity == "12"
    assert items["Eggs"].auto_added is True

    chore = db_session.query(Chore).one()
    assert chore.assigned_to == home.member.user_id


# =============================================================================
# REAL-TIME
# =============================================================================


def test_realtime_request(db_session: Session, home):
    r = client.post(
        "/api/ai/realtime",
        json={
            "type": "chore_assignment",
            "household_id": str(home.household.household_id),
            "context": {"chores": ["dishes", "laundry"]},
        },
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["request_id"].startswith("realtime_")
    assert body["data"]["total_chores"] == 2

    status = client.get("/api/ai/realtime", headers=auth(home.owner.user_id)).json()
    assert status["queue_size"] == 0
    assert status["processing"] == []


def test_realtime_disabled_feature_forbidden(db_session: Session, home):
    ai_config_manager.disable_feature(MEAL_PLANNING)
    r = client.post(
        "/api/ai/realtime",
        json={"type": "meal_planning", "household_id": str(home.household.household_id)},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 403


def test_realtime_unknown_type_rejected(db_session: Session, home):
    r = client.post(
        "/api/ai/realtime",
        json={"type": "laundry_folding", "household_id": str(home.household.household_id)},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 422


def test_event_stream_greets_subscriber():
    user_id = uuid.uuid4()
    with client.websocket_connect(f"/api/ai/events?user_id={user_id}") as ws:
        assert ws.receive_json() == {"type": "connected", "user_id": str(user_id)}


# =============================================================================
# BATCH
# =============================================================================


def _create_job(home, user_id=None, **extra):
    payload = {
        "action": "create_job",
        "name": "Nightly chores",
        "requests": [
            {
                "type": "chore_assignment",
                "household_id": str(home.household.household_id),
                "context": {"chores": ["vacuum"]},
            }
        ],
    }
    payload.update(extra)
    return client.post("/api/ai/batch", json=payload, headers=auth(user_id or home.owner.user_id))


def test_batch_create_and_process(db_session: Session, home):
    r = _create_job(home)
    assert r.status_code == 200
    job = r.json()
    assert job["status"] == "pending"
    assert job["total_requests"] == 1

    r = client.post(
        "/api/ai/batch", json={"action": "process_job", "job_id": job["id"]}, headers=auth(home.owner.user_id)
    )
    assert r.status_code == 200
    done = r.json()
    assert done["status"] == "completed"
    assert done["successful_requests"] == 1
    assert done["results"][0]["data"]["total_chores"] == 1

    r = client.get("/api/ai/batch", headers=auth(home.owner.user_id))
    assert [j["id"] for j in r.json()["jobs"]] == [job["id"]]
    assert r.json()["queue_size"] == 0


def test_batch_jobs_are_private(db_session: Session, home):
    job = _create_job(home).json()

    r = client.get(f"/api/ai/batch?job_id={job['id']}", headers=auth(home.member.user_id))
    assert r.status_code == 403
    assert client.get("/api/ai/batch", headers=auth(home.member.user_id)).json()["jobs"] == []

    r = client.post(
        "/api/ai/batch", json={"action": "cancel_job", "job_id": job["id"]}, headers=auth(home.owner.user_id)
    )
    assert r.json() == {"job_id": job["id"], "cancelled": True}


def test_batch_validation_errors(db_session: Session, home):
    assert _create_job(home, requests=[]).status_code == 400
    assert _create_job(home, user_id=home.outsider.user_id).status_code == 403

    r = client.post("/api/ai/batch", json={"action": "process_job"}, headers=auth(home.owner.user_id))
    assert r.status_code == 400

    r = client.get("/api/ai/batch?job_id=batch_missing", headers=auth(home.owner.user_id))
    assert r.status_code == 404


def test_batch_update_config(db_session: Session, home, monkeypatch):
    monkeypatch.setattr(batch_processor, "config", BatchConfig())

    r = client.post(
        "/api/ai/batch",
        json={"action": "update_config", "config": {"batch_size": 4, "enable_retry": False}},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 200
    assert r.json()["batch_size"] == 4
    assert r.json()["enable_retry"] is False

    r = client.post(
        "/api/ai/batch",
        json={"action": "update_config", "config": {"warp_speed": True}},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 422


@pytest.mark.parametrize(
    "config",
    [
        {"batch_size": "ten"},
        {"batch_size": 0},
        {"max_concurrent_requests": -1},
        {"timeout": 0},
        {"max_retries": -2},
    ],
)
def test_batch_update_config_rejects_bad_values(db_session: Session, home, monkeypatch, config):
    """
    Verifies:
    - Mistyped or out-of-range settings are a validation error
    - The process-wide config is left untouched, so later jobs still run
    """
    monkeypatch.setattr(batch_processor, "config", BatchConfig())

    r = client.post(
        "/api/ai/batch",
        json={"action": "update_config", "config": config},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 422
    assert batch_processor.get_config() == BatchConfig()

    job = _create_job(home).json()
    r = client.post(
        "/api/ai/batch", json={"action": "process_job", "job_id": job["id"]}, headers=auth(home.owner.user_id)
    )
    assert r.json()["status"] == "completed"


def test_batch_update_config_ignores_nulls(db_session: Session, home, monkeypatch):
    monkeypatch.setattr(batch_processor, "config", BatchConfig())

    r = client.post(
        "/api/ai/batch",
        json={"action": "update_config", "config": {"batch_size": None, "max_retries": 0}},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 200
    assert r.json()["batch_size"] == 10
    assert r.json()["max_retries"] == 0


def test_batch_accepts_urgent_priority(db_session: Session, home):
    r = _create_job(
        home,
        requests=[
            {
                "type": "chore_assignment",
                "household_id": str(home.household.household_id),
                "context": {"chores": ["unblock drain"]},
                "priority": "urgent",
            }
        ],
    )
    assert r.status_code == 200
    assert r.json()["total_requests"] == 1
