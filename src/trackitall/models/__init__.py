"""SQLModel table exports."""

from .habit import DEFAULT_CATEGORY, DEFAULT_COLOR, Habit, HabitLog
from .user import User

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_COLOR",
    "Habit",
    "HabitLog",
    "User",
]
