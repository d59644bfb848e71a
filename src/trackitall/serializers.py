"""JSON shapes returned by the API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from .models.habit import Habit, HabitLog
from .models.user import User


def isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def user_to_dict(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email}


def habit_to_dict(habit: Habit) -> dict:
    return {
        "id": habit.id,
        "userId": habit.user_id,
        "name": habit.name,
        "category": habit.category,
        "color": habit.color,
        "createdAt": isoformat(habit.created_at),
        "updatedAt": isoformat(habit.updated_at),
    }


def log_to_dict(log: HabitLog, habit: Habit) -> dict:
    """A log with its habit embedded."""

    return {
        "id": log.id,
        "userId": log.user_id,
        "habit": habit_to_dict(habit),
        "date": log.date,
        "completed": log.completed,
        "createdAt": isoformat(log.created_at),
        "updatedAt": isoformat(log.updated_at),
    }
