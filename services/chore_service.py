"""Chore management service"""

import logging
import re
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import ChoreStatus
from domain.models import AppUser, Chore, ChoreCompletion, as_utc_naive
from domain.schemas.chore_schemas import ChoreCreate, ChoreUpdate
from repositories import ChoreCompletionRepository, ChoreRepository
from services.household_service import HouseholdService
from services.ai.chore_assignment import ChoreAssignmentService

logger = logging.getLogger("homehub.chores")

_UNSAFE_CHARS = re.compile(r"[\x00-\x1f\x7f<>]")
# Columns a partial update may change but never clear
_NOT_NULL_FIELDS = ("status", "priority")


def sanitize_title(title: str) -> str:
    """Strip markup-significant and control characters from a user-supplied title."""
    cleaned = _UNSAFE_CHARS.sub("", title or "")
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if not cleaned:
        raise ServiceValidationError("Title must contain visible characters")
    return cleaned


class ChoreService:
    """Business logic for chores and chore completions."""

    @staticmethod
    def list_chores(db: Session, household_id: UUID, user_id: UUID) -> List[Chore]:
        HouseholdService.require_access(db, user_id, household_id)
        return ChoreRepository(db).list_for_household(household_id)

    @staticmethod
    def get_chore(db: Session, chore_id: UUID, user_id: UUID) -> Chore:
        chore = ChoreRepository(db).get_by_id(chore_id)
        if not chore:
            raise NotFoundError(f"Chore {chore_id} not found")
        HouseholdService.require_access(db, user_id, chore.household_id)
        return chore

    @staticmethod
    def create_chore(db: Session, payload: ChoreCreate, user_id: UUID) -> Chore:
        HouseholdService.require_access(db, user_id, payload.household_id)

        data = payload.model_dump()
        data["title"] = sanitize_title(payload.title)
        data["due_at"] = as_utc_naive(payload.due_at)
        if payload.assigned_to:
            HouseholdService.require_access(db, payload.assigned_to, payload.household_id)

        chore = Chore(**data, created_by=user_id)
        if chore.assigned_to:
            chore.status = ChoreStatus.ASSIGNED
        chore = ChoreRepository(db).create(chore)

        logger.info(f"Chore created: {chore.chore_id} in household {chore.household_id}")
        return chore

    @staticmethod
    def update_chore(
        db: Session, chore_id: UUID, payload: ChoreUpdate, user_id: UUID
    ) -> Chore:
        chore = ChoreService.get_chore(db, chore_id, user_id)

        changes = payload.model_dump(exclude_unset=True)
        for field in _NOT_NULL_FIELDS:
            if field in changes and changes[field] is None:
                raise ServiceValidationError(f"Chore {field} cannot be null")
        if "title" in changes:
            changes["title"] = sanitize_title(changes["title"])
        if "due_at" in changes:
            changes["due_at"] = as_utc_naive(changes["due_at"])
        if changes.get("assigned_to"):
            HouseholdService.require_access(db, changes["assigned_to"], chore.household_id)

        for field, value in changes.items():
            setattr(chore, field, value)

        return ChoreRepository(db).update(chore)

    @staticmethod
    def delete_chore(db: Session, chore_id: UUID, user_id: UUID) -> bool:
        chore = ChoreService.get_chore(db, chore_id, user_id)
        db.delete(chore)
        db.commit()
        logger.info(f"Chore deleted: {chore_id}")
        return True

    @staticmethod
    def complete_chore(
        db: Session, chore_id: UUID, user_id: UUID, xp: int = 10
    ) -> ChoreCompletion:
        """
        Mark a chore completed by the user and award XP.

        Steps:
        1. Load the chore and check household membership
        2. Insert a ChoreCompletion row
        3. Add the XP to the user's total
        4. Set the chore status to completed

        All three writes are committed together.
        """
        chore = ChoreService.get_chore(db, chore_id, user_id)

        user = db.get(AppUser, user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")

        completion = ChoreCompletion(chore_id=chore.chore_id, user_id=user_id, xp_awarded=xp)
        db.add(completion)
        user.xp = (user.xp or 0) + xp
        chore.status = ChoreStatus.COMPLETED

        db.commit()
        db.refresh(completion)

        logger.info(f"Chore {chore_id} completed by {user_id} (+{xp} xp)")
        return completion

    @staticmethod
    def list_completions(
        db: Session, household_id: UUID, user_id: UUID, limit: int = 100
    ) -> List[ChoreCompletion]:
        HouseholdService.require_access(db, user_id, household_id)
        return ChoreCompletionRepository(db).list_for_household(household_id, limit=limit)

    @staticmethod
    def assign_chore(db: Session, chore_id: UUID, user_id: UUID, strategy: str):
        """
        Pick an assignee among household members and store the assignment.

        Returns:
            Tuple of (updated chore, AssignmentResult)
        """
        chore = ChoreService.get_chore(db, chore_id, user_id)
        workloads = ChoreAssignmentService.build_workloads(db, chore.household_id)
        result = ChoreAssignmentService.assign_chore(
            ChoreAssignmentService.chore_input(chore), workloads, strategy
        )

        chore.assigned_to = result.assigned_user_id
        chore.status = ChoreStatus.ASSIGNED
        chore = ChoreRepository(db).update(chore)

        logger.info(
            f"Chore {chore_id} assigned to {result.assigned_user_id} "
            f"via {result.strategy} (confidence {result.confidence})"
        )
        return chore, result
