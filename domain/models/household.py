"""
Household and user models.
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, Integer, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base, utcnow, enum_column
from domain.enums import MemberRole


class Household(Base):
    """A group of users sharing chores, meals and shopping"""

    __tablename__ = "household"

    household_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    members = relationship(
        "HouseholdMember", back_populates="household", cascade="all, delete-orphan"
    )


class AppUser(Base):
    """User account model"""

    __tablename__ = "app_user"

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False)
    full_name = Column(Text)
    xp = Column(Integer, nullable=False, default=0)
    coins = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    memberships = relationship(
        "HouseholdMember", back_populates="user", cascade="all, delete-orphan"
    )


class HouseholdMember(Base):
    """Membership of a user in a household"""

    __tablename__ = "household_member"
    __table_args__ = (
        UniqueConstraint("household_id", "user_id", name="uq_household_member"),
    )

    member_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(
        Uuid, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=False
    )
    role = Column(
        enum_column(MemberRole, "member_role"), nullable=False, default=MemberRole.MEMBER
    )
    joined_at = Column(DateTime, default=utcnow)

    household = relationship("Household", back_populates="members")
    user = relationship("AppUser", back_populates="memberships")
