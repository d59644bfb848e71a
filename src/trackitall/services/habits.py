"""Habit registry operations scoped to one user."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..domain.repositories import HabitRepository
from ..errors import NotFoundError, TransientError, ValidationError
from ..logging_config import get_logger
from ..models.habit import DEFAULT_CATEGORY, DEFAULT_COLOR, Habit

logger = get_logger(__name__)


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required")
    return cleaned


def list_habits(repo: HabitRepository, *, user_id: int) -> list[Habit]:
    return repo.list_all(user_id=user_id)


def create_habit(
    repo: HabitRepository,
    *,
    user_id: int,
    name: Optional[str],
    category: Optional[str] = None,
    color: Optional[str] = None,
) -> Habit:
    """Create a habit; blank category/color fall back to the defaults."""

    habit = Habit(
        user_id=user_id,
        name=_clean_name(name),
        category=(category or "").strip() or DEFAULT_CATEGORY,
        color=(color or "").strip() or DEFAULT_COLOR,
    )
    habit = repo.create(habit, user_id=user_id)
    logger.info("Habit created", extra={"user_id": user_id, "habit_id": habit.id})
    return habit


def update_habit(
    repo: HabitRepository, *, user_id: int, habit_id: int, changes: dict
) -> Habit:
    """Rename or recolour a habit. Logs reference the id, so they are untouched."""

    cleaned: dict = {}
    if "name" in changes:
        cleaned["name"] = _clean_name(changes["name"])
    for key, default in (("category", DEFAULT_CATEGORY), ("color", DEFAULT_COLOR)):
        if key in changes:
            cleaned[key] = (changes[key] or "").strip() or default

    habit = repo.update(habit_id, cleaned, user_id=user_id)
    if habit is None:
        raise NotFoundError("Habit not found")
    logger.info(
        "Habit updated",
        extra={"user_id": user_id, "habit_id": habit_id, "fields": sorted(cleaned)},
    )
    return habit


def delete_habit(repo: HabitRepository, *, user_id: int, habit_id: int) -> int:
    """Delete a habit together with its logs and return the number of logs removed.

    A retry that finds the habit already gone still removes leftover logs
    and counts as success when it did; otherwise the habit is reported
    missing.
    """

    try:
        habit_deleted, logs_deleted = repo.delete_with_logs(habit_id, user_id=user_id)
    except SQLAlchemyError as exc:
        logger.exception(
            "Habit cascade failed", extra={"user_id": user_id, "habit_id": habit_id}
        )
        raise TransientError("Deleting the habit did not finish, please retry") from exc

    if not habit_deleted and not logs_deleted:
        raise NotFoundError("Habit not found")
    logger.info(
        "Habit deleted",
        extra={
            "user_id": user_id,
            "habit_id": habit_id,
            "logs_deleted": logs_deleted,
            "habit_already_gone": not habit_deleted,
        },
    )
    return logs_deleted


__all__ = ["create_habit", "delete_habit", "list_habits", "update_habit"]
