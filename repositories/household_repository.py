"""
Household Repository - Data access for households, users and memberships
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Household, AppUser, HouseholdMember


class HouseholdRepository(BaseRepository[Household]):
    """Repository for household data access"""

    def __init__(self, db: Session):
        super().__init__(db, Household)


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_email(self, email: str) -> Optional[AppUser]:
        """Get user by email (case-insensitive)"""
        return (
            self.db.query(AppUser)
            .filter(AppUser.email == email.strip().lower())
            .first()
        )


class MemberRepository(BaseRepository[HouseholdMember]):
    """Repository for household membership data access"""

    def __init__(self, db: Session):
        super().__init__(db, HouseholdMember)

    def get_membership(
        self, household_id: UUID, user_id: UUID
    ) -> Optional[HouseholdMember]:
        """Get a user's membership row in a household"""
        return (
            self.db.query(HouseholdMember)
            .filter(
                HouseholdMember.household_id == household_id,
                HouseholdMember.user_id == user_id,
            )
            .first()
        )

    def get_by_household(self, household_id: UUID, order_by=None, limit=None) -> List[HouseholdMember]:
        """Get all members of a household, oldest membership first"""
        return super().get_by_household(
            household_id,
            order_by=order_by if order_by is not None else HouseholdMember.joined_at,
            limit=limit,
        )
