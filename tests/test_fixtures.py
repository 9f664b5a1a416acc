"""
Shared test fixtures and utilities for the HomeHub test suite.

The application runs against an in-memory SQLite database (configured in
conftest.py). Tests that touch the database take the `db_session` fixture,
which creates the schema before the test and drops it afterwards; requests made
through `client` use the same database.
"""

import uuid
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Generator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from domain.enums import ChorePriority, ChoreStatus, MemberRole
from domain.models import (
    AppUser,
    Base,
    Chore,
    Household,
    HouseholdMember,
    Recipe,
    SessionLocal,
    engine,
    utcnow,
)
from main import app

# Module-level client; the lifespan (schema creation with retries) only runs
# when the client is used as a context manager, which the tests never do.
client = TestClient(app)


def unique_email(prefix: str = "test") -> str:
    """Generate unique email address using UUID to avoid conflicts"""
    return f"{prefix}-{uuid.uuid4()}@example.com"


def auth(user_id) -> dict:
    """Headers identifying the caller"""
    return {"X-User-ID": str(user_id)}


# =============================================================================
# DATABASE SESSION FIXTURE
# =============================================================================


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    Yields:
        Session: SQLAlchemy session bound to the shared in-memory engine
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


# =============================================================================
# DATABASE FACTORIES
# =============================================================================


def create_user(db: Session, full_name: str = "Sarah Martinez", email: Optional[str] = None) -> AppUser:
    user = AppUser(email=email or unique_email("sarah.martinez"), full_name=full_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_household(db: Session, owner: AppUser, name: str = "Martinez Home", members=()) -> Household:
    """Household owned by `owner`, with `members` added as plain members"""
    household = Household(name=name)
    db.add(household)
    db.flush()
    db.add(HouseholdMember(household_id=household.household_id, user_id=owner.user_id, role=MemberRole.OWNER))
    for member in members:
        db.add(
            HouseholdMember(household_id=household.household_id, user_id=member.user_id, role=MemberRole.MEMBER)
        )
    db.commit()
    db.refresh(household)
    return household


def create_chore(db: Session, household: Household, title: str = "Take out trash", **fields) -> Chore:
    chore = Chore(household_id=household.household_id, title=title, **fields)
    db.add(chore)
    db.commit()
    db.refresh(chore)
    return chore


def create_recipe(db: Session, household: Household, title: str = "Tomato Pasta", ingredients=None, **fields) -> Recipe:
    recipe = Recipe(
        household_id=household.household_id,
        title=title,
        ingredients=ingredients
        or [
            {"name": "Pasta", "amount": 500, "unit": "g"},
            {"name": "Fresh Tomatoes", "amount": 4, "unit": None},
            {"name": "Olive oil", "amount": 2, "unit": "tbsp"},
        ],
        **fields,
    )
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return recipe


@pytest.fixture
def home(db_session: Session) -> SimpleNamespace:
    """
    A household with an owner (Sarah) and a member (Michael), plus an outsider
    (Emma) who belongs to no household.
    """
    owner = create_user(db_session, "Sarah Martinez")
    member = create_user(db_session, "Michael Chen", unique_email("michael.chen"))
    outsider = create_user(db_session, "Emma Johnson", unique_email("emma.johnson"))
    household = create_household(db_session, owner, members=[member])
    return SimpleNamespace(owner=owner, member=member, outsider=outsider, household=household)


# =============================================================================
# MOCK OBJECTS FOR ENDPOINT TESTS
# =============================================================================


def make_chore(chore_id=None, household_id=None, title="Vacuum living room", **overrides):
    """Mock chore object with the attributes ChoreResponse reads"""
    now = datetime.utcnow()
    data = dict(
        chore_id=chore_id or uuid.uuid4(),
        household_id=household_id or uuid.uuid4(),
        title=title,
        description=None,
        assigned_to=None,
        created_by=None,
        due_at=now + timedelta(days=1),
        category="cleaning",
        priority=ChorePriority.MEDIUM,
        status=ChoreStatus.PENDING,
        rrule=None,
        ai_difficulty_rating=40,
        ai_estimated_duration=30,
        ai_energy_level=None,
        created_at=now,
        updated_at=now,
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def hours_ago(hours: float) -> datetime:
    return utcnow() - timedelta(hours=hours)
