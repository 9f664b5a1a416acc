"""API routes package"""

from . import (
    ai,
    calendar,
    chores,
    health,
    households,
    meal_planner,
    recipes,
    reminders,
    shopping,
    users,
)

__all__ = [
    "ai",
    "calendar",
    "chores",
    "health",
    "households",
    "meal_planner",
    "recipes",
    "reminders",
    "shopping",
    "users",
]
