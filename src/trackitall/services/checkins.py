"""Daily check-in writes over the log store."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from ..domain.repositories import HabitRepository
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.habit import Habit, HabitLog

logger = get_logger(__name__)

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


@dataclass(frozen=True)
class CheckInResult:
    log: HabitLog
    habit: Habit


def parse_log_date(value: object) -> str:
    """Return ``value`` when it is a zero-padded ``YYYY-MM-DD`` Gregorian day."""

    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise ValidationError("date must be a calendar day formatted as YYYY-MM-DD")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"{value} is not a real calendar day") from None
    return value


def set_check_in(
    repo: HabitRepository,
    *,
    user_id: int,
    habit_id: int,
    log_date: object,
    completed: object,
) -> CheckInResult:
    """Record whether a habit was completed on a day.

    Any valid date is accepted; keeping past and future days read-only is
    left to the client. ``completed`` is taken by truthiness, so a missing
    or null flag records an unchecked day. Repeating a call leaves the same
    row behind, and for one (habit, user, date) key the latest call wins.
    """

    habit = repo.get_by_id(habit_id, user_id=user_id)
    if habit is None:
        raise NotFoundError("Habit not found")
    day = parse_log_date(log_date)

    log = repo.upsert_log(habit_id, day, bool(completed), user_id=user_id)
    logger.info(
        "Check-in recorded",
        extra={
            "user_id": user_id,
            "habit_id": habit_id,
            "date": day,
            "completed": log.completed,
        },
    )
    return CheckInResult(log=log, habit=habit)


__all__ = ["CheckInResult", "parse_log_date", "set_check_in"]
