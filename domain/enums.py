"""
Domain enums for HomeHub application.
Contains all enumeration types used across the domain models.
"""

import enum


class MemberRole(str, enum.Enum):
    """Role of a user inside a household"""

    OWNER = "owner"
    MEMBER = "member"


class ChorePriority(str, enum.Enum):
    """Chore urgency"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ChoreStatus(str, enum.Enum):
    """Chore lifecycle states"""

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class EnergyLevel(str, enum.Enum):
    """Effort a chore takes, or the energy a member prefers to spend"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReminderRelatedType(str, enum.Enum):
    """What a reminder points at"""

    CHORE = "chore"
    CALENDAR_EVENT = "calendar_event"


class WeekDay(str, enum.Enum):
    """Meal planner days, in week order starting on Sunday"""

    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


class MealSlot(str, enum.Enum):
    """Meal planner slots"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class SuggestionType(str, enum.Enum):
    """Kinds of AI suggestions"""

    CALENDAR_EVENT = "calendar_event"
    SHOPPING_LIST_UPDATE = "shopping_list_update"
    CHORE_CREATION = "chore_creation"
    BILL_ACTION = "bill_action"
    MEAL_SUGGESTION = "meal_suggestion"


class UserFeedback(str, enum.Enum):
    """User feedback recorded on an AI suggestion"""

    PENDING = "pending"
    COMPLETED = "completed"
    IGNORED = "ignored"
    CORRECTED = "corrected"


class CorrectionType(str, enum.Enum):
    """How a user reacted to an AI suggestion"""

    CORRECT = "correct"
    MARK_DONE = "mark_done"
    IGNORE = "ignore"
    CUSTOM = "custom"
