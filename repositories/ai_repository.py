"""
AI Repository - Data access for suggestions, corrections and learning state
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import (
    AISuggestion,
    AICorrection,
    AICorrectionPattern,
    AIHouseholdProfile,
    AILearningRule,
)


class SuggestionRepository(BaseRepository[AISuggestion]):
    """Repository for AI suggestion data access"""

    def __init__(self, db: Session):
        super().__init__(db, AISuggestion)


class CorrectionRepository(BaseRepository[AICorrection]):
    """Repository for AI correction data access"""

    def __init__(self, db: Session):
        super().__init__(db, AICorrection)

    def list_for_household(self, household_id: UUID, limit: int = 50) -> List[AICorrection]:
        return (
            self.db.query(AICorrection)
            .filter(AICorrection.household_id == household_id)
            .order_by(AICorrection.created_at.desc())
            .limit(limit)
            .all()
        )


class PatternRepository(BaseRepository[AICorrectionPattern]):
    """Repository for correction pattern data access"""

    def __init__(self, db: Session):
        super().__init__(db, AICorrectionPattern)

    def list_for_household(self, household_id: UUID) -> List[AICorrectionPattern]:
        return (
            self.db.query(AICorrectionPattern)
            .filter(AICorrectionPattern.household_id == household_id)
            .order_by(AICorrectionPattern.created_at.desc())
            .all()
        )


class HouseholdProfileRepository(BaseRepository[AIHouseholdProfile]):
    """Repository for per-household learning profiles"""

    def __init__(self, db: Session):
        super().__init__(db, AIHouseholdProfile)

    def get_by_household_id(self, household_id: UUID) -> Optional[AIHouseholdProfile]:
        return (
            self.db.query(AIHouseholdProfile)
            .filter(AIHouseholdProfile.household_id == household_id)
            .first()
        )


class LearningRuleRepository(BaseRepository[AILearningRule]):
    """Repository for learning rule data access"""

    def __init__(self, db: Session):
        super().__init__(db, AILearningRule)

    def get_active_rules(self, household_id: UUID) -> List[AILearningRule]:
        """Active rules for the household plus global ones, highest priority first"""
        return (
            self.db.query(AILearningRule)
            .filter(
                AILearningRule.is_active.is_(True),
                or_(
                    AILearningRule.household_id == household_id,
                    AILearningRule.household_id.is_(None),
                ),
            )
            .order_by(AILearningRule.priority.desc())
            .all()
        )
