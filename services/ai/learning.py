"""
Learning from user corrections of AI suggestions.

Each correction is reduced to a pattern (what kind of mistake it was), stored,
matched against learning rules and folded into the household's profile.
Insights summarize that history for the dashboard.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.enums import CorrectionType, UserFeedback
from domain.models import (
    AICorrection,
    AICorrectionPattern,
    AIHouseholdProfile,
    AILearningRule,
    utcnow,
)
from domain.schemas.ai_schemas import CorrectionRequest
from repositories import (
    CorrectionRepository,
    HouseholdProfileRepository,
    LearningRuleRepository,
    PatternRepository,
    SuggestionRepository,
)
from services.ai.config import LEARNING_SYSTEM, AIConfigManager, ai_config_manager
from services.household_service import HouseholdService

logger = logging.getLogger("homehub.ai.learning")

RULE_TRIGGER_SCORE = 0.5
TREND_WINDOW_DAYS = 30
TREND_PERCENT = {"improving": 85, "stable": 65, "declining": 35}
DEFAULT_CONFIDENCE_THRESHOLD = 75
DEFAULT_THRESHOLD_STEP = 5

BASE_IMPACT = {"correct": 0.3, "ignore": 0.2, "mark_done": 0.1}

IMPROVEMENTS = {
    ("data_extraction", "missing_data"): [
        "Improve data extraction prompts for your email formats",
        "Add validation for required fields",
    ],
    ("data_extraction", "incorrect_data"): [
        "Refine data parsing logic for your providers",
        "Add data validation rules",
    ],
    ("classification", None): [
        "Update classification rules for your email types",
        "Improve confidence thresholds for your categories",
    ],
    ("confidence_threshold", None): [
        "Adjust confidence thresholds for your suggestion types",
        "Add more context to low-confidence suggestions",
    ],
    ("user_preference", None): [
        "Learn your preferences for suggestion types",
        "Personalize suggestions based on your household patterns",
    ],
}


@dataclass
class PatternLearningRequest:
    correction_id: Optional[UUID]
    household_id: UUID
    correction_type: str
    user_notes: str = ""
    original_suggestion: Dict[str, Any] = field(default_factory=dict)
    user_correction: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LearningAnalysis:
    pattern_type: str
    issue_category: str
    confidence_impact: float
    learning_priority: str
    suggested_improvements: List[str]


# =============================================================================
# Correction classification
# =============================================================================


def has_missing_data(original: Dict[str, Any], corrected: Dict[str, Any]) -> bool:
    if not original or not corrected:
        return False
    return len(corrected) > len(original) or any(
        corrected[key] and not original.get(key) for key in corrected
    )


def has_incorrect_data(original: Dict[str, Any], corrected: Dict[str, Any]) -> bool:
    if not original or not corrected:
        return False
    return any(
        original.get(key) and value and original[key] != value
        for key, value in corrected.items()
    )


def has_wrong_classification(original: Dict[str, Any], corrected: Dict[str, Any]) -> bool:
    if not original or not corrected:
        return False
    for key in ("suggestion_type", "item_type"):
        if original.get(key) and corrected.get(key) and original[key] != corrected[key]:
            return True
    return False


def classify_correction(
    correction_type: str, original: Dict[str, Any], corrected: Dict[str, Any]
) -> Tuple[str, str]:
    """(pattern_type, issue_category) of a correction."""
    if correction_type == CorrectionType.CORRECT.value:
        if has_missing_data(original, corrected):
            return "data_extraction", "missing_data"
        if has_incorrect_data(original, corrected):
            return "data_extraction", "incorrect_data"
        if has_wrong_classification(original, corrected):
            return "classification", "wrong_classification"
    elif correction_type == CorrectionType.IGNORE.value:
        return "confidence_threshold", "low_confidence"
    return "user_preference", "user_override"


def confidence_impact(correction_type: str, user_notes: str) -> float:
    impact = BASE_IMPACT.get(correction_type, 0.1)
    if len(user_notes or "") > 50:
        impact *= 1.5
    return round(min(impact, 1.0), 4)


def learning_priority(pattern_type: str) -> str:
    if pattern_type in ("classification", "data_extraction"):
        return "high"
    if pattern_type == "confidence_threshold":
        return "medium"
    return "low"


def suggested_improvements(areas: List[Tuple[str, str]]) -> List[str]:
    """Improvement hints for (pattern_type, issue_category) pairs plus a progress message."""
    if not areas:
        return ["Start providing feedback to help the AI learn your preferences"]

    improvements: List[str] = []
    for key, hints in IMPROVEMENTS.items():
        pattern_type, category = key
        matched = any(
            p == pattern_type and (category is None or c == category) for p, c in areas
        )
        if matched:
            improvements.extend(hints)

    if len(areas) < 5:
        improvements.append("Continue providing feedback to build better learning patterns")
    elif len(areas) < 10:
        improvements.append("Great progress! Keep correcting to refine AI understanding")
    else:
        improvements.append("Excellent learning progress! Consider reviewing advanced settings")
    return improvements


def _area(pattern: AICorrectionPattern) -> Tuple[str, str]:
    return pattern.pattern_type, (pattern.pattern_data or {}).get("issue_category", "unknown")


# =============================================================================
# Learning rules
# =============================================================================


def rule_score(rule: AILearningRule, pattern: AICorrectionPattern) -> float:
    """Match score of a rule's conditions against a pattern, capped at 1."""
    conditions = rule.conditions or {}
    data = pattern.pattern_data or {}
    score = 0.0
    if conditions.get("pattern_type") and conditions["pattern_type"] == pattern.pattern_type:
        score += 0.5
    if conditions.get("issue_category") and conditions["issue_category"] == data.get("issue_category"):
        score += 0.3
    if conditions.get("correction_type") and conditions["correction_type"] == data.get("correction_type"):
        score += 0.2
    return min(round(score, 4), 1.0)


def apply_rule_action(
    rule: AILearningRule, pattern: AICorrectionPattern, profile: AIHouseholdProfile
) -> None:
    actions = rule.actions or {}
    action = actions.get("action")
    data = pattern.pattern_data or {}

    if action == "update_email_format_preferences":
        prefs = dict(profile.email_format_preferences or {})
        category = data.get("issue_category", "unknown")
        prefs[category] = prefs.get(category, 0) + 1
        profile.email_format_preferences = prefs

    elif action == "update_bill_provider_patterns":
        corrected = data.get("corrected") or {}
        provider = corrected.get("provider") or corrected.get("bill_provider")
        if provider:
            known = dict(profile.bill_provider_patterns or {})
            entry = dict(known.get(provider) or {})
            entry["corrections"] = entry.get("corrections", 0) + 1
            entry["fields"] = sorted(set(entry.get("fields", [])) | set(corrected))
            known[provider] = entry
            profile.bill_provider_patterns = known

    elif action == "adjust_confidence_threshold":
        step = int(actions.get("delta", DEFAULT_THRESHOLD_STEP))
        current = profile.confidence_threshold
        if current is None:
            current = DEFAULT_CONFIDENCE_THRESHOLD
        profile.confidence_threshold = max(0, min(100, current + step))

    else:
        logger.warning(f"Learning rule {rule.rule_name} has unknown action {action!r}")


class AILearningService:
    """Correction analysis, learning rules and household learning insights."""

    @staticmethod
    def analyze_correction(
        db: Session,
        request: PatternLearningRequest,
        config_manager: Optional[AIConfigManager] = None,
    ) -> Tuple[AICorrectionPattern, LearningAnalysis]:
        """
        Extract a pattern from one correction and learn from it.

        Steps:
        1. Classify the correction and score its confidence impact
        2. Persist an AICorrectionPattern (strength 1, not learned)
        3. Fire matching learning rules (when the learning system is enabled)
        4. Count the correction on the household profile

        Returns:
            Tuple of (stored pattern, analysis)
        """
        config_manager = config_manager or ai_config_manager
        original = request.original_suggestion or {}
        corrected = request.user_correction or {}

        pattern_type, issue_category = classify_correction(
            request.correction_type, original, corrected
        )
        analysis = LearningAnalysis(
            pattern_type=pattern_type,
            issue_category=issue_category,
            confidence_impact=confidence_impact(request.correction_type, request.user_notes),
            learning_priority=learning_priority(pattern_type),
            suggested_improvements=suggested_improvements([(pattern_type, issue_category)]),
        )

        pattern = AICorrectionPattern(
            household_id=request.household_id,
            correction_id=request.correction_id,
            pattern_type=pattern_type,
            pattern_data={
                "issue_category": issue_category,
                "correction_type": request.correction_type,
                "priority": analysis.learning_priority,
                "original": original,
                "corrected": corrected,
                "notes": request.user_notes,
            },
            confidence_impact=analysis.confidence_impact,
            pattern_strength=1,
            is_learned=False,
        )
        db.add(pattern)
        db.flush()

        profile = AILearningService._get_or_create_profile(db, request.household_id)
        if config_manager.is_enabled(LEARNING_SYSTEM):
            AILearningService.trigger_learning_rules(db, pattern, profile)

        profile.total_corrections = (profile.total_corrections or 0) + 1
        profile.last_learning_update = utcnow()

        db.commit()
        db.refresh(pattern)

        logger.info(
            f"Correction pattern {pattern.pattern_id} for household {request.household_id}: "
            f"{pattern_type}/{issue_category} (learned={pattern.is_learned})"
        )
        return pattern, analysis

    @staticmethod
    def _get_or_create_profile(db: Session, household_id: UUID) -> AIHouseholdProfile:
        profile = HouseholdProfileRepository(db).get_by_household_id(household_id)
        if profile is None:
            profile = AIHouseholdProfile(
                household_id=household_id,
                total_corrections=0,
                successful_learnings=0,
                accuracy_improvement=0.0,
                confidence_threshold=DEFAULT_CONFIDENCE_THRESHOLD,
            )
            db.add(profile)
            db.flush()
        return profile

    @staticmethod
    def trigger_learning_rules(
        db: Session, pattern: AICorrectionPattern, profile: AIHouseholdProfile
    ) -> List[AILearningRule]:
        """Apply every active rule whose conditions match; returns the fired rules."""
        fired = []
        for rule in LearningRuleRepository(db).get_active_rules(pattern.household_id):
            if rule_score(rule, pattern) < RULE_TRIGGER_SCORE:
                continue
            apply_rule_action(rule, pattern, profile)
            pattern.is_learned = True
            pattern.learned_at = utcnow()
            profile.successful_learnings = (profile.successful_learnings or 0) + 1
            profile.accuracy_improvement = round(
                min(1.0, (profile.accuracy_improvement or 0.0) + pattern.confidence_impact / 10), 4
            )
            fired.append(rule)
            logger.info(f"Learning rule fired: {rule.rule_name}")
        return fired

    @staticmethod
    def record_correction(db: Session, payload: CorrectionRequest, user_id: UUID):
        """
        Store a user's correction of a suggestion and learn from it.

        Returns:
            Tuple of (correction, user_feedback, stored pattern, analysis)
        """
        suggestion = SuggestionRepository(db).get_by_id(payload.suggestion_id)
        if not suggestion:
            raise NotFoundError(f"Suggestion {payload.suggestion_id} not found")
        HouseholdService.require_access(db, user_id, suggestion.household_id)

        original = dict(suggestion.suggestion_data or {})
        original.setdefault("suggestion_type", getattr(
            suggestion.suggestion_type, "value", suggestion.suggestion_type
        ))

        correction = AICorrection(
            suggestion_id=suggestion.suggestion_id,
            household_id=suggestion.household_id,
            user_id=user_id,
            correction_type=payload.correction_type,
            original_suggestion=original,
            user_correction=payload.correction_data or {},
            user_notes=payload.user_notes,
        )
        db.add(correction)

        if payload.correction_type == CorrectionType.MARK_DONE:
            feedback = UserFeedback.COMPLETED
        elif payload.correction_type == CorrectionType.IGNORE:
            feedback = UserFeedback.IGNORED
        else:
            feedback = UserFeedback.CORRECTED
        suggestion.user_feedback = feedback

        db.commit()
        db.refresh(correction)

        pattern, analysis = AILearningService.analyze_correction(
            db,
            PatternLearningRequest(
                correction_id=correction.correction_id,
                household_id=correction.household_id,
                correction_type=payload.correction_type.value,
                user_notes=payload.user_notes,
                original_suggestion=original,
                user_correction=payload.correction_data or {},
            ),
        )
        return correction, feedback, pattern, analysis

    @staticmethod
    def list_corrections(db: Session, household_id: UUID, user_id: UUID) -> List[AICorrection]:
        HouseholdService.require_access(db, user_id, household_id)
        return CorrectionRepository(db).list_for_household(household_id)

    @staticmethod
    def get_household_learning_insights(
        db: Session, household_id: UUID, user_id: Optional[UUID] = None
    ) -> Dict[str, Any]:
        """Dashboard summary of what the AI has learned for a household."""
        if user_id is not None:
            HouseholdService.require_access(db, user_id, household_id)

        profile = HouseholdProfileRepository(db).get_by_household_id(household_id)
        total_corrections = (
            db.query(AICorrection).filter(AICorrection.household_id == household_id).count()
        )
        learned = [p for p in PatternRepository(db).list_for_household(household_id) if p.is_learned]
        areas = [_area(p) for p in learned]

        area_counts = Counter(f"{pattern_type} ({category})" for pattern_type, category in areas)

        return {
            "household_id": household_id,
            "total_corrections": total_corrections,
            "patterns_identified": len(learned),
            "accuracy_trend": TREND_PERCENT[AILearningService.accuracy_trend(profile, learned)],
            "top_learning_areas": [area for area, _ in area_counts.most_common(3)],
            "suggested_improvements": suggested_improvements(areas),
            "confidence_threshold": (
                profile.confidence_threshold if profile and profile.confidence_threshold is not None
                else DEFAULT_CONFIDENCE_THRESHOLD
            ),
            "learning_goals": AILearningService.learning_goals(profile),
            "last_updated": utcnow(),
        }

    @staticmethod
    def accuracy_trend(
        profile: Optional[AIHouseholdProfile], patterns: List[AICorrectionPattern]
    ) -> str:
        """improving / stable / declining from the share of recent high-priority patterns."""
        if profile is None or not patterns:
            return "stable"
        since = utcnow() - timedelta(days=TREND_WINDOW_DAYS)
        recent = [p for p in patterns if p.created_at and p.created_at > since]
        if not recent:
            return "stable"

        high = sum(1 for p in recent if learning_priority(p.pattern_type) == "high")
        if high > len(patterns) * 0.3:
            return "improving"
        if high < len(patterns) * 0.1:
            return "declining"
        return "stable"

    @staticmethod
    def learning_goals(profile: Optional[AIHouseholdProfile]) -> List[str]:
        if profile is None:
            return []
        goals = []
        if (profile.total_corrections or 0) < 10:
            goals.append("Reach 10 total corrections for better pattern recognition")
        if (profile.successful_learnings or 0) < 5:
            goals.append("Achieve 5 successful learning patterns")
        if (profile.accuracy_improvement or 0.0) < 0.1:
            goals.append("Improve accuracy by 10% through learning")
        return goals
