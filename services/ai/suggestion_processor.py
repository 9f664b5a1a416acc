"""Turn accepted AI suggestions into household records"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.exceptions import HomeHubError
from domain.schemas.ai_schemas import SuggestionItem, SuggestionProcessResult
from domain.schemas.chore_schemas import CalendarEventCreate, ChoreCreate
from services.calendar_service import CalendarService
from services.chore_service import ChoreService
from services.household_service import HouseholdService
from services.shopping_service import ShoppingService

logger = logging.getLogger("homehub.ai.suggestions")

DEFAULT_EVENT_DURATION = timedelta(hours=1)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class SuggestionProcessor:
    """Apply suggestions one by one; a failing suggestion does not stop the rest."""

    @staticmethod
    def process_suggestions(
        db: Session,
        household_id: UUID,
        user_id: UUID,
        suggestions: List[SuggestionItem],
    ) -> List[SuggestionProcessResult]:
        HouseholdService.require_access(db, user_id, household_id)

        results = []
        for suggestion in suggestions:
            try:
                record_id = SuggestionProcessor.process_one(db, household_id, user_id, suggestion)
                results.append(
                    SuggestionProcessResult(
                        id=suggestion.id,
                        suggestion_type=suggestion.suggestion_type,
                        household_id=household_id,
                        user_id=user_id,
                        success=True,
                        created_record_id=record_id,
                    )
                )
            except (HomeHubError, ValidationError, ValueError) as e:
                db.rollback()
                logger.warning(
                    f"Failed to process suggestion {suggestion.id} ({suggestion.suggestion_type}): {e}"
                )
                results.append(
                    SuggestionProcessResult(
                        id=suggestion.id,
                        suggestion_type=suggestion.suggestion_type,
                        household_id=household_id,
                        user_id=user_id,
                        success=False,
                        error=str(e),
                    )
                )

        logger.info(
            f"Processed {len(results)} suggestions for household {household_id}: "
            f"{sum(1 for r in results if r.success)} applied"
        )
        return results

    @staticmethod
    def process_one(
        db: Session, household_id: UUID, user_id: UUID, suggestion: SuggestionItem
    ) -> UUID:
        """Create the record for one suggestion and return its id."""
        data: Dict[str, Any] = suggestion.suggestion_data or {}

        if suggestion.suggestion_type == "calendar_event":
            start = _parse_datetime(data.get("event_date") or data.get("start_at"))
            if start is None:
                raise ValueError("Calendar suggestion has no event date")
            end = _parse_datetime(data.get("end_at")) or start + DEFAULT_EVENT_DURATION
            event = CalendarService.create_event(
                db,
                CalendarEventCreate(
                    household_id=household_id,
                    title=data.get("event_title") or data.get("title") or "Appointment from AI suggestion",
                    description=data.get("description"),
                    start_at=start,
                    end_at=end,
                    location=data.get("event_location") or data.get("location"),
                ),
                user_id,
            )
            return event.event_id

        if suggestion.suggestion_type == "shopping_list_update":
            items = data.get("items")
            if isinstance(items, list) and items:
                entries = [
                    item if isinstance(item, dict) else {"name": str(item)} for item in items
                ]
            elif data.get("description"):
                entries = [{"name": data["description"]}]
            else:
                raise ValueError("Shopping suggestion has no items")
            for entry in entries:
                entry.setdefault("quantity", "1")
            result = ShoppingService.add_to_default_list(
                db, household_id, user_id, entries, auto_added=True
            )
            return result["list_id"]

        if suggestion.suggestion_type == "chore_creation":
            chore = ChoreService.create_chore(
                db,
                ChoreCreate(
                    household_id=household_id,
                    title=data.get("title") or data.get("description") or "Chore from AI suggestion",
                    assigned_to=data.get("assigned_to") or user_id,
                    priority=data.get("priority") or "medium",
                    due_at=_parse_datetime(data.get("due_date") or data.get("due_at")),
                    category=data.get("category"),
                ),
                user_id,
            )
            return chore.chore_id

        raise ValueError(f"Unsupported suggestion type: {suggestion.suggestion_type}")
