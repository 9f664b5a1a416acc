"""
Database side of the AI endpoints.

AI calls are async; everything here is plain synchronous SQLAlchemy work that
routes run in a worker thread around those calls.
"""

import logging
from statistics import mean
from typing import Any, Dict, List, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import SuggestionType
from domain.models import AISuggestion
from domain.schemas.ai_schemas import ChoreAssignmentRequest
from repositories import ChoreRepository, SuggestionRepository
from services.ai.chore_assignment import ChoreAssignmentService
from services.ai.meal_planning import MealPlanningAIService
from services.ai.shopping_suggestions import (
    ShoppingSuggestionsAIService,
    suggested_items,
)
from services.household_service import HouseholdService

logger = logging.getLogger("homehub.ai.suggestions")

DEFAULT_SUGGESTION_CONFIDENCE = 75


def average_confidence(groups: Any) -> int:
    """Mean of the numeric `confidence` values of suggestion groups or items."""
    values = [
        g["confidence"]
        for g in groups or []
        if isinstance(g, dict) and isinstance(g.get("confidence"), (int, float))
    ]
    return round(mean(values)) if values else DEFAULT_SUGGESTION_CONFIDENCE


class AISuggestionService:
    @staticmethod
    def shopping_history(db: Session, household_id: UUID, user_id: UUID) -> List[Dict[str, Any]]:
        HouseholdService.require_access(db, user_id, household_id)
        return ShoppingSuggestionsAIService.load_history(db, household_id)

    @staticmethod
    def meal_history(
        db: Session, household_id: UUID, user_id: UUID
    ) -> Tuple[List[Dict[str, str]], List[str]]:
        HouseholdService.require_access(db, user_id, household_id)
        return MealPlanningAIService.load_history(db, household_id)

    @staticmethod
    def store_suggestion(
        db: Session,
        household_id: UUID,
        user_id: UUID,
        suggestion_type: SuggestionType,
        data: Dict[str, Any],
        confidence: int = DEFAULT_SUGGESTION_CONFIDENCE,
    ) -> AISuggestion:
        suggestion = SuggestionRepository(db).create(
            AISuggestion(
                household_id=household_id,
                user_id=user_id,
                suggestion_type=suggestion_type,
                suggestion_data=data,
                ai_confidence=confidence,
            )
        )
        logger.info(
            f"Stored {suggestion_type.value} suggestion {suggestion.suggestion_id} "
            f"for household {household_id}"
        )
        return suggestion

    @staticmethod
    def store_shopping_suggestions(
        db: Session, household_id: UUID, user_id: UUID, groups: Any
    ) -> AISuggestion:
        """Save suggestion groups with their flattened items, ready to apply to a list."""
        return AISuggestionService.store_suggestion(
            db,
            household_id,
            user_id,
            SuggestionType.SHOPPING_LIST_UPDATE,
            {"suggestions": groups, "items": suggested_items(groups)},
            confidence=average_confidence(groups),
        )

    @staticmethod
    def store_meal_suggestions(
        db: Session, household_id: UUID, user_id: UUID, suggestions: Any
    ) -> AISuggestion:
        return AISuggestionService.store_suggestion(
            db,
            household_id,
            user_id,
            SuggestionType.MEAL_SUGGESTION,
            {"suggestions": suggestions},
            confidence=average_confidence(suggestions),
        )

    @staticmethod
    def chore_assignment(
        db: Session, payload: ChoreAssignmentRequest, user_id: UUID
    ) -> Dict[str, Any]:
        """
        Recommend an assignee for a stored chore (chore_id) or an ad-hoc one (chore).

        Nothing is persisted; storing the assignment is done through the
        chore's own assign endpoint.

        Raises:
            ServiceValidationError: If neither chore_id nor chore is given
            NotFoundError: If chore_id is not a chore of the household
        """
        HouseholdService.require_access(db, user_id, payload.household_id)

        if payload.chore_id is not None:
            chore = ChoreRepository(db).get_by_id(payload.chore_id)
            if not chore or chore.household_id != payload.household_id:
                raise NotFoundError(f"Chore {payload.chore_id} not found")
            chore_data = ChoreAssignmentService.chore_input(chore)
        elif payload.chore is not None:
            chore_data = payload.chore.model_dump(mode="json")
        else:
            raise ServiceValidationError("Either chore_id or chore is required")

        workloads = ChoreAssignmentService.build_workloads(db, payload.household_id)
        result = ChoreAssignmentService.assign_chore(chore_data, workloads, payload.strategy)
        response: Dict[str, Any] = {"assignment": result.to_dict()}
        if payload.recommendations:
            response["recommendations"] = [
                r.to_dict()
                for r in ChoreAssignmentService.get_assignment_recommendations(
                    chore_data, workloads
                )
            ]
        return response

