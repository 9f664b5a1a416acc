"""
Tests for learning from corrections.

Covers:
- Correction classification, confidence impact and learning priority
- Pattern storage and learning rule firing (gated by the learning_system feature)
- Recording corrections through the API and the learning insights summary
"""

import pytest
from sqlalchemy.orm import Session

from test_fixtures import auth, client, db_session, home
from app.config import Settings
from domain.enums import SuggestionType, UserFeedback
from domain.models import AICorrectionPattern, AIHouseholdProfile, AILearningRule, AISuggestion
from services.ai.config import LEARNING_SYSTEM, AIConfigManager
from services.ai.learning import (
    AILearningService,
    PatternLearningRequest,
    classify_correction,
    confidence_impact,
    has_wrong_classification,
    learning_priority,
    rule_score,
    suggested_improvements,
)


# =============================================================================
# CLASSIFICATION
# =============================================================================


@pytest.mark.parametrize(
    "correction_type, original, corrected, expected",
    [
        ("correct", {"item": "Milk"}, {"item": "Milk", "quantity": "2"}, ("data_extraction", "missing_data")),
        ("correct", {"amount": 40}, {"amount": 45}, ("data_extraction", "incorrect_data")),
        ("correct", {}, {"amount": 45}, ("user_preference", "user_override")),
        ("ignore", {"amount": 40}, {}, ("confidence_threshold", "low_confidence")),
        ("mark_done", {"amount": 40}, {"amount": 40}, ("user_preference", "user_override")),
        ("custom", {}, {}, ("user_preference", "user_override")),
    ],
)
def test_classify_correction(correction_type, original, corrected, expected):
    assert classify_correction(correction_type, original, corrected) == expected


def test_wrong_classification_compares_types():
    assert has_wrong_classification({"suggestion_type": "bill_action"}, {"suggestion_type": "calendar_event"})
    assert not has_wrong_classification({"suggestion_type": "bill_action"}, {"title": "x"})


def test_confidence_impact():
    assert confidence_impact("correct", "short") == 0.3
    assert confidence_impact("correct", "x" * 51) == 0.45
    assert confidence_impact("ignore", "") == 0.2
    assert confidence_impact("custom", "") == 0.1


def test_learning_priority():
    assert learning_priority("classification") == "high"
    assert learning_priority("data_extraction") == "high"
    assert learning_priority("confidence_threshold") == "medium"
    assert learning_priority("user_preference") == "low"


def test_suggested_improvements():
    assert suggested_improvements([]) == ["Start providing feedback to help the AI learn your preferences"]

    hints = suggested_improvements([("data_extraction", "missing_data")])
    assert hints[0] == "Improve data extraction prompts for your email formats"
    assert hints[-1] == "Continue providing feedback to build better learning patterns"

    many = suggested_improvements([("user_preference", "user_override")] * 12)
    assert many[-1] == "Excellent learning progress! Consider reviewing advanced settings"


def test_rule_score():
    pattern = AICorrectionPattern(
        pattern_type="data_extraction",
        pattern_data={"issue_category": "missing_data", "correction_type": "correct"},
    )
    full = AILearningRule(
        conditions={"pattern_type": "data_extraction", "issue_category": "missing_data", "correction_type": "correct"}
    )
    partial = AILearningRule(conditions={"issue_category": "missing_data"})
    assert rule_score(full, pattern) == 1.0
    assert rule_score(partial, pattern) == 0.3


# =============================================================================
# PATTERNS AND RULES
# =============================================================================


def _rule(db: Session, household_id=None, **fields) -> AILearningRule:
    rule = AILearningRule(household_id=household_id, rule_type="threshold", **fields)
    db.add(rule)
    db.commit()
    return rule


def _ignore_request(home) -> PatternLearningRequest:
    return PatternLearningRequest(
        correction_id=None,
        household_id=home.household.household_id,
        correction_type="ignore",
        user_notes="not relevant",
    )


def test_analyze_correction_fires_matching_rule(db_session: Session, home):
    _rule(
        db_session,
        rule_name="Lower threshold on ignores",
        conditions={"pattern_type": "confidence_threshold"},
        actions={"action": "adjust_confidence_threshold", "delta": -5},
    )
    _rule(
        db_session,
        rule_name="Unrelated",
        conditions={"pattern_type": "classification"},
        actions={"action": "adjust_confidence_threshold", "delta": 50},
    )

    pattern, analysis = AILearningService.analyze_correction(
        db_session, _ignore_request(home), AIConfigManager(Settings())
    )

    assert analysis.learning_priority == "medium"
    assert pattern.is_learned is True
    assert pattern.learned_at is not None
    assert pattern.pattern_strength == 1

    profile = db_session.query(AIHouseholdProfile).one()
    assert profile.confidence_threshold == 70
    assert profile.successful_learnings == 1
    assert profile.total_corrections == 1
    assert profile.accuracy_improvement == 0.02


def test_learning_system_disabled_stores_pattern_only(db_session: Session, home):
    _rule(
        db_session,
        rule_name="Lower threshold on ignores",
        conditions={"pattern_type": "confidence_threshold"},
        actions={"action": "adjust_confidence_threshold"},
    )
    config = AIConfigManager(Settings())
    config.disable_feature(LEARNING_SYSTEM)

    pattern, _ = AILearningService.analyze_correction(db_session, _ignore_request(home), config)

    assert pattern.is_learned is False
    profile = db_session.query(AIHouseholdProfile).one()
    assert profile.confidence_threshold == 75
    assert profile.total_corrections == 1


def test_bill_provider_rule_records_fields(db_session: Session, home):
    _rule(
        db_session,
        household_id=home.household.household_id,
        rule_name="Bill providers",
        conditions={"pattern_type": "data_extraction", "issue_category": "incorrect_data"},
        actions={"action": "update_bill_provider_patterns"},
    )
    AILearningService.analyze_correction(
        db_session,
        PatternLearningRequest(
            correction_id=None,
            household_id=home.household.household_id,
            correction_type="correct",
            original_suggestion={"provider": "City Water", "amount": 40},
            user_correction={"provider": "City Water", "amount": 42},
        ),
        AIConfigManager(Settings()),
    )

    profile = db_session.query(AIHouseholdProfile).one()
    assert profile.bill_provider_patterns == {"City Water": {"corrections": 1, "fields": ["amount", "provider"]}}


# =============================================================================
# CORRECTIONS API AND INSIGHTS
# =============================================================================


def _suggestion(db: Session, home) -> AISuggestion:
    suggestion = AISuggestion(
        household_id=home.household.household_id,
        user_id=home.owner.user_id,
        suggestion_type=SuggestionType.CALENDAR_EVENT,
        suggestion_data={"event_title": "Dentist"},
    )
    db.add(suggestion)
    db.commit()
    db.refresh(suggestion)
    return suggestion


def test_record_correction_endpoint(db_session: Session, home):
    suggestion = _suggestion(db_session, home)
    _rule(
        db_session,
        rule_name="Email formats",
        conditions={"pattern_type": "data_extraction"},
        actions={"action": "update_email_format_preferences"},
    )

    r = client.post(
        "/api/ai/corrections",
        json={
            "suggestion_id": str(suggestion.suggestion_id),
            "correction_type": "correct",
            "correction_data": {"event_title": "Dentist", "event_date": "2026-10-21T09:00:00"},
            "user_notes": "The date was missing",
        },
        headers=auth(home.member.user_id),
    )
    assert r.status_code == 201
    body = r.json()
    assert body["user_feedback"] == "corrected"
    assert body["pattern_type"] == "data_extraction"
    assert body["issue_category"] == "missing_data"
    assert body["priority"] == "high"
    assert body["confidence_impact"] == 0.3
    assert body["correction"]["original_suggestion"]["suggestion_type"] == "calendar_event"

    db_session.expire_all()
    assert db_session.get(AISuggestion, suggestion.suggestion_id).user_feedback == UserFeedback.CORRECTED
    assert db_session.query(AIHouseholdProfile).one().email_format_preferences == {"missing_data": 1}

    r = client.get(
        f"/api/ai/corrections?household_id={home.household.household_id}", headers=auth(home.owner.user_id)
    )
    assert [c["user_notes"] for c in r.json()] == ["The date was missing"]

    r = client.get(
        f"/api/ai/learning-insights?household_id={home.household.household_id}", headers=auth(home.owner.user_id)
    )
    insights = r.json()
    assert insights["total_corrections"] == 1
    assert insights["patterns_identified"] == 1
    assert insights["accuracy_trend"] == 85
    assert insights["top_learning_areas"] == ["data_extraction (missing_data)"]
    assert insights["confidence_threshold"] == 75
    assert len(insights["learning_goals"]) == 3


@pytest.mark.parametrize("correction_type, feedback", [("ignore", "ignored"), ("mark_done", "completed")])
def test_correction_feedback_mapping(db_session: Session, home, correction_type, feedback):
    suggestion = _suggestion(db_session, home)
    r = client.post(
        "/api/ai/corrections",
        json={"suggestion_id": str(suggestion.suggestion_id), "correction_type": correction_type, "user_notes": "ok"},
        headers=auth(home.owner.user_id),
    )
    assert r.json()["user_feedback"] == feedback


def test_correction_requires_notes(db_session: Session, home):
    suggestion = _suggestion(db_session, home)
    r = client.post(
        "/api/ai/corrections",
        json={"suggestion_id": str(suggestion.suggestion_id), "correction_type": "ignore", "user_notes": ""},
        headers=auth(home.owner.user_id),
    )
    assert r.status_code == 422


def test_correction_by_outsider_forbidden(db_session: Session, home):
    suggestion = _suggestion(db_session, home)
    r = client.post(
        "/api/ai/corrections",
        json={"suggestion_id": str(suggestion.suggestion_id), "correction_type": "ignore", "user_notes": "meh"},
        headers=auth(home.outsider.user_id),
    )
    assert r.status_code == 403


def test_insights_without_history(db_session: Session, home):
    insights = AILearningService.get_household_learning_insights(
        db_session, home.household.household_id, home.owner.user_id
    )
    assert insights["total_corrections"] == 0
    assert insights["accuracy_trend"] == 65
    assert insights["learning_goals"] == []
    assert insights["suggested_improvements"] == ["Start providing feedback to help the AI learn your preferences"]


def test_insights_trend_declines_without_high_priority_learning(db_session: Session, home):
    """
    Verifies:
    - Learned patterns that are all medium/low priority mark the trend as declining
    """
    _rule(
        db_session,
        rule_name="Lower threshold on ignores",
        conditions={"pattern_type": "confidence_threshold"},
        actions={"action": "adjust_confidence_threshold", "delta": -5},
    )
    config = AIConfigManager(Settings())
    for _ in range(2):
        AILearningService.analyze_correction(db_session, _ignore_request(home), config)

    insights = AILearningService.get_household_learning_insights(db_session, home.household.household_id)
    assert insights["patterns_identified"] == 2
    assert insights["accuracy_trend"] == 35
    assert insights["top_learning_areas"] == ["confidence_threshold (low_confidence)"]
    assert insights["confidence_threshold"] == 65
