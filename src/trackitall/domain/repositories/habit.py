"""Habit registry and log store protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.habit import Habit, HabitLog


class HabitRepository(Protocol):
    """Repository for habits and their daily logs, always scoped to one user."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit only when ``user_id`` owns it."""
        ...

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List habits ordered by creation time, oldest first."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        ...

    def update(self, habit_id: int, changes: dict, *, user_id: int) -> Optional[Habit]:
        """Apply ``changes`` to mutable fields; None when not owned."""
        ...

    def delete_with_logs(self, habit_id: int, *, user_id: int) -> tuple[bool, int]:
        """Delete the habit and its logs; return (habit_deleted, logs_deleted)."""
        ...

    # Log operations
    def upsert_log(
        self, habit_id: int, log_date: str, completed: bool, *, user_id: int
    ) -> HabitLog:
        """Insert or update the single log keyed by (habit, user, date)."""
        ...

    def list_logs_for_month(self, month: str, *, user_id: int) -> list[tuple[HabitLog, Habit]]:
        ...

    def list_logs(self, *, user_id: int) -> list[tuple[HabitLog, Habit]]:
        ...

    def count_habits(self, *, user_id: int) -> int:
        ...

    def count_logs(self, *, user_id: int) -> int:
        ...
