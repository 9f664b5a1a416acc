"""Household, user and membership service"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, ForbiddenError, NotFoundError
from domain.enums import MemberRole
from domain.models import AppUser, Household, HouseholdMember
from repositories import HouseholdRepository, MemberRepository, UserRepository

logger = logging.getLogger("homehub.households")


class HouseholdService:
    """Business logic for households and the membership access checks."""

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    @staticmethod
    def create_user(db: Session, email: str, full_name: Optional[str] = None) -> AppUser:
        """Create a user; emails are unique case-insensitively."""
        user_repo = UserRepository(db)
        normalized = email.strip().lower()
        if user_repo.get_by_email(normalized):
            raise ConflictError(f"User with email {normalized} already exists")

        user = AppUser(email=normalized, full_name=full_name)
        try:
            user = user_repo.create(user)
        except IntegrityError:
            db.rollback()
            raise ConflictError(f"User with email {normalized} already exists")

        logger.info(f"User created: {user.user_id}")
        return user

    @staticmethod
    def get_user(db: Session, user_id: UUID) -> AppUser:
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    # -------------------------------------------------------------------------
    # Households
    # -------------------------------------------------------------------------

    @staticmethod
    def create_household(db: Session, name: str, owner_id: UUID) -> Household:
        """
        Create a household and make the caller its owner.

        Args:
            db: Database session
            name: Household display name
            owner_id: User who becomes the owner

        Returns:
            The new Household

        Raises:
            NotFoundError: If the owner does not exist
        """
        HouseholdService.get_user(db, owner_id)

        household = Household(name=name.strip())
        db.add(household)
        db.flush()
        db.add(
            HouseholdMember(
                household_id=household.household_id,
                user_id=owner_id,
                role=MemberRole.OWNER,
            )
        )
        db.commit()
        db.refresh(household)

        logger.info(f"Household created: {household.household_id} owner={owner_id}")
        return household

    @staticmethod
    def add_member(
        db: Session,
        household_id: UUID,
        user_id: UUID,
        role: MemberRole,
        requested_by: UUID,
    ) -> HouseholdMember:
        """Add a user to a household; only owners may add members."""
        caller_role = HouseholdService.require_access(db, requested_by, household_id)
        if caller_role != MemberRole.OWNER:
            raise ForbiddenError("Only household owners can add members")

        HouseholdService.get_user(db, user_id)

        member_repo = MemberRepository(db)
        if member_repo.get_membership(household_id, user_id):
            raise ConflictError(
                f"User {user_id} is already a member of household {household_id}"
            )

        member = member_repo.create(
            HouseholdMember(household_id=household_id, user_id=user_id, role=role)
        )
        logger.info(f"Member {user_id} added to household {household_id} as {role.value}")
        return member

    @staticmethod
    def list_members(db: Session, household_id: UUID) -> List[HouseholdMember]:
        return MemberRepository(db).get_by_household(household_id)

    # -------------------------------------------------------------------------
    # Access checks
    # -------------------------------------------------------------------------

    @staticmethod
    def verify_access(
        db: Session, user_id: UUID, household_id: UUID
    ) -> Tuple[bool, Optional[MemberRole]]:
        """Return (has_access, role) for the user in the household."""
        membership = MemberRepository(db).get_membership(household_id, user_id)
        if not membership:
            return False, None
        return True, membership.role

    @staticmethod
    def require_access(db: Session, user_id: UUID, household_id: UUID) -> MemberRole:
        """Return the caller's role or raise ForbiddenError for non-members."""
        has_access, role = HouseholdService.verify_access(db, user_id, household_id)
        if not has_access:
            logger.warning(
                f"Access denied: user {user_id} is not a member of household {household_id}"
            )
            raise ForbiddenError("Access denied to household")
        return role
