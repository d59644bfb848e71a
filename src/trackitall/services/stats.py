"""Monthly consistency statistics computed from raw habit logs."""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from ..domain.repositories import HabitRepository
from ..errors import ValidationError
from ..models.habit import Habit, HabitLog

_MONTH_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})")

# Fixed day-of-month buckets; the last one is clipped to the month length.
WEEK_RANGES: tuple[tuple[int, int], ...] = ((1, 7), (8, 14), (15, 21), (22, 28), (29, 31))


def parse_month(value: object) -> tuple[int, int]:
    """Return (year, month) for a ``YYYY-MM`` string or raise ValidationError."""

    match = _MONTH_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise ValidationError("month must be formatted as YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(f"{value} is not a valid month")
    return year, month


def previous_month(month: str) -> str | None:
    """The calendar month before ``month``; None for January of year 1."""

    year, number = parse_month(month)
    if number == 1:
        if year == 1:
            return None
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{number - 1:02d}"


def days_in_month(month: str) -> int:
    year, number = parse_month(month)
    return calendar.monthrange(year, number)[1]


def percent(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up; 0 when ``whole`` is 0."""

    if whole <= 0:
        return 0
    ratio = Decimal(100 * part) / Decimal(whole)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(slots=True)
class HabitCompletion:
    habit_id: int
    name: str
    completed_days: int
    percent: int

    def to_dict(self) -> dict:
        return {
            "habitId": self.habit_id,
            "name": self.name,
            "completedDays": self.completed_days,
            "percent": self.percent,
        }


@dataclass(slots=True)
class WeekCompletion:
    label: str
    start: int
    end: int
    completed: int
    total: int
    percent: int

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "start": self.start,
            "end": self.end,
            "completed": self.completed,
            "total": self.total,
            "percent": self.percent,
        }


@dataclass(slots=True)
class DayCompletion:
    date: str
    completed: int
    total: int
    percent: int

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "completed": self.completed,
            "total": self.total,
            "percent": self.percent,
        }


@dataclass(slots=True)
class MonthStats:
    """Aggregates for one user and one calendar month."""

    month: str
    days_in_month: int
    habit_count: int
    total_completed: int
    total_possible: int
    overall_completion: int
    per_habit: list[HabitCompletion] = field(default_factory=list)
    weekly: list[WeekCompletion] = field(default_factory=list)
    daily: list[DayCompletion] = field(default_factory=list)

    def summary_dict(self) -> dict:
        return {
            "month": self.month,
            "overallCompletion": self.overall_completion,
            "totalCompleted": self.total_completed,
            "totalPossible": self.total_possible,
            "perHabit": [item.to_dict() for item in self.per_habit],
        }

    def to_dict(self) -> dict:
        payload = self.summary_dict()
        payload.update(
            {
                "daysInMonth": self.days_in_month,
                "habitCount": self.habit_count,
                "weekly": [item.to_dict() for item in self.weekly],
                "daily": [item.to_dict() for item in self.daily],
            }
        )
        return payload


def compute_month_stats(
    *, month: str, habits: Sequence[Habit], logs: Iterable[HabitLog]
) -> MonthStats:
    """Compose overall, per-habit, weekly and per-day completion for ``month``.

    ``habits`` must be the user's current habits in creation order. Only
    logs with ``completed`` set count; a stored ``completed=False`` row and a
    missing row are the same thing here. Habits created mid-month still use
    the whole month as their denominator.
    """

    day_count = days_in_month(month)
    habit_count = len(habits)
    prefix = f"{month}-"

    completed_logs = [log for log in logs if log.completed and log.date.startswith(prefix)]
    by_habit: dict[int, int] = {}
    by_day: dict[int, int] = {}
    for log in completed_logs:
        by_habit[log.habit_id] = by_habit.get(log.habit_id, 0) + 1
        day = int(log.date[8:10])
        by_day[day] = by_day.get(day, 0) + 1

    total_completed = len(completed_logs)
    total_possible = habit_count * day_count

    per_habit = [
        HabitCompletion(
            habit_id=habit.id,  # type: ignore[arg-type]
            name=habit.name,
            completed_days=by_habit.get(habit.id, 0),  # type: ignore[arg-type]
            percent=percent(by_habit.get(habit.id, 0), day_count),  # type: ignore[arg-type]
        )
        for habit in habits
    ]
    # sorted() is stable, so equal percentages keep creation order
    per_habit = sorted(per_habit, key=lambda item: item.percent, reverse=True)

    weekly: list[WeekCompletion] = []
    if habit_count:
        for index, (start, end) in enumerate(WEEK_RANGES, start=1):
            end = min(end, day_count)
            if start > end:
                continue
            completed = sum(by_day.get(day, 0) for day in range(start, end + 1))
            total = (end - start + 1) * habit_count
            weekly.append(
                WeekCompletion(
                    label=f"Week {index}",
                    start=start,
                    end=end,
                    completed=completed,
                    total=total,
                    percent=percent(completed, total),
                )
            )

    daily = [
        DayCompletion(
            date=f"{month}-{day:02d}",
            completed=by_day.get(day, 0),
            total=habit_count,
            percent=percent(by_day.get(day, 0), habit_count),
        )
        for day in range(1, day_count + 1)
    ]

    return MonthStats(
        month=month,
        days_in_month=day_count,
        habit_count=habit_count,
        total_completed=total_completed,
        total_possible=total_possible,
        overall_completion=percent(total_completed, total_possible),
        per_habit=per_habit,
        weekly=weekly,
        daily=daily,
    )


def month_stats_for_user(repo: HabitRepository, *, user_id: int, month: str) -> MonthStats:
    """Fetch the user's habits and month logs, then aggregate them."""

    parse_month(month)
    habits = repo.list_all(user_id=user_id)
    logs = [log for log, _habit in repo.list_logs_for_month(month, user_id=user_id)]
    return compute_month_stats(month=month, habits=habits, logs=logs)


def dashboard_stats(repo: HabitRepository, *, user_id: int, month: str) -> dict:
    """Stats for ``month`` plus the previous month's summary for comparison.

    The previous month is measured against the current habit list, so a
    habit added this month also counts in last month's denominator.
    """

    current = month_stats_for_user(repo, user_id=user_id, month=month)
    payload = current.to_dict()
    earlier_month = previous_month(month)
    payload["previousMonth"] = None
    if earlier_month is not None:
        earlier = month_stats_for_user(repo, user_id=user_id, month=earlier_month)
        payload["previousMonth"] = earlier.summary_dict()
    return payload


__all__ = [
    "DayCompletion",
    "HabitCompletion",
    "MonthStats",
    "WeekCompletion",
    "compute_month_stats",
    "dashboard_stats",
    "days_in_month",
    "month_stats_for_user",
    "parse_month",
    "percent",
    "previous_month",
]
