from __future__ import annotations

from enum import Enum


class Scope(str, Enum):
    """Which roster a check-in session or history view works on."""

    STUDENT = "student"
    PERSONNEL = "personnel"


class AttendanceStatus(str, Enum):
    """Status values stored on an attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    LEAVE = "leave"
    SICK = "sick"
    HOME = "home"
    ACTIVITY = "activity"

    @classmethod
    def parse(cls, value) -> "AttendanceStatus | None":
        """Return the matching status, or None for values outside the enum."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


class NutritionTargetGroup(str, Enum):
    KINDERGARTEN = "kindergarten"
    PRIMARY = "primary"
    SECONDARY = "secondary"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
