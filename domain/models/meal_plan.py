"""
Meal planning and recipe-related models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    ForeignKey,
    Integer,
    Date,
    Boolean,
    JSON,
    Uuid,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base, utcnow


class Recipe(Base):
    """Household recipe with structured ingredients"""

    __tablename__ = "recipe"

    recipe_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    title = Column(Text, nullable=False)
    description = Column(Text)
    ingredients = Column(JSON, nullable=False, default=list)  # [{name, amount, unit}]
    instructions = Column(JSON, nullable=False, default=list)
    prep_time = Column(Integer)
    cook_time = Column(Integer)
    servings = Column(Integer, default=1)
    tags = Column(JSON, default=list)
    created_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class MealPlan(Base):
    """Weekly meal plan; meals maps day -> slot -> recipe id"""

    __tablename__ = "meal_plan"
    __table_args__ = (
        UniqueConstraint("household_id", "week_start_date", name="uq_meal_plan_week"),
    )

    plan_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    week_start_date = Column(Date, nullable=False)
    meals = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class ShoppingList(Base):
    """Household shopping list"""

    __tablename__ = "shopping_list"
    list_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id = Column(
        Uuid, ForeignKey("household.household_id", ondelete="CASCADE"), nullable=False
    )
    title = Column(Text, nullable=False)
    description = Column(Text)
    created_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    is_default = Column(Boolean, nullable=False, default=False)
    ai_suggestions_count = Column(Integer, nullable=False, default=0)
    ai_confidence = Column(Integer, nullable=False, default=75)
    created_at = Column(DateTime, default=utcnow)

    items = relationship(
        "ShoppingItem",
        back_populates="list",
        cascade="all, delete-orphan",
        order_by="ShoppingItem.created_at",
    )


# At most one default list per household
Index(
    "uq_shopping_list_default",
    ShoppingList.household_id,
    unique=True,
    postgresql_where=ShoppingList.is_default.is_(True),
    sqlite_where=ShoppingList.is_default.is_(True),
)


class ShoppingItem(Base):
    """Individual item in a shopping list"""

    __tablename__ = "shopping_item"

    item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    list_id = Column(
        Uuid, ForeignKey("shopping_list.list_id", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    quantity = Column(Text)
    category = Column(Text)
    notes = Column(Text)
    completed = Column(Boolean, nullable=False, default=False)
    completed_by = Column(Uuid, ForeignKey("app_user.user_id", ondelete="SET NULL"))
    completed_at = Column(DateTime)
    auto_added = Column(Boolean, nullable=False, default=False)
    pending_confirmation = Column(Boolean, nullable=False, default=False)
    source_recipe_id = Column(Uuid, ForeignKey("recipe.recipe_id", ondelete="SET NULL"))
    created_at = Column(DateTime, default=utcnow)

    list = relationship("ShoppingList", back_populates="items")
