"""SQLModel implementation of the habit registry and log store."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...errors import TransientError
from ...logging_config import get_logger
from ...models._time import utcnow
from ...models.habit import Habit, HabitLog
from ..database import SessionFactory

logger = get_logger(__name__)

MUTABLE_HABIT_FIELDS = ("name", "category", "color")


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation.

    Every query filters on the owning ``user_id`` so a foreign id behaves
    exactly like a missing one.
    """

    max_upsert_attempts = 3

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List habits in creation order."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.created_at, Habit.id)  # type: ignore[arg-type]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit_id: int, changes: dict, *, user_id: int) -> Optional[Habit]:
        """Apply name/category/color changes to an owned habit."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return None
            for key in MUTABLE_HABIT_FIELDS:
                if key in changes:
                    setattr(habit, key, changes[key])
            habit.updated_at = utcnow()
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete_with_logs(self, habit_id: int, *, user_id: int) -> tuple[bool, int]:
        """Delete a habit and every log for (habit, user) in one session.

        Logs go first so the foreign key never points at a missing habit.
        Re-running after the habit is gone still sweeps leftover logs.
        """
        with self.session_factory() as session:
            logs = session.exec(
                select(HabitLog)
                .where(HabitLog.habit_id == habit_id)
                .where(HabitLog.user_id == user_id)
            ).all()
            for log in logs:
                session.delete(log)
            session.flush()

            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is not None:
                session.delete(habit)
            session.commit()
            return habit is not None, len(logs)

    # Log operations
    def upsert_log(
        self, habit_id: int, log_date: str, completed: bool, *, user_id: int
    ) -> HabitLog:
        """Insert or update a log; ``completed`` is always assigned.

        A concurrent insert of the same key trips the unique constraint; the
        loser rolls back and retries, finding the row and updating it.
        """
        for attempt in range(1, self.max_upsert_attempts + 1):
            try:
                with self.session_factory() as session:
                    log = session.exec(self._log_key_query(habit_id, log_date, user_id)).first()
                    if log is None:
                        log = HabitLog(
                            user_id=user_id,
                            habit_id=habit_id,
                            date=log_date,
                            completed=completed,
                        )
                    else:
                        log.completed = completed
                        log.updated_at = utcnow()
                    session.add(log)
                    session.commit()
                    session.refresh(log)
                    session.expunge(log)
                    return log
            except IntegrityError:
                logger.info(
                    "Check-in collided with a concurrent write; retrying",
                    extra={
                        "user_id": user_id,
                        "habit_id": habit_id,
                        "date": log_date,
                        "attempt": attempt,
                    },
                )
        raise TransientError("Could not record the check-in, please retry")

    def list_logs_for_month(self, month: str, *, user_id: int) -> list[tuple[HabitLog, Habit]]:
        """Return (log, habit) pairs whose date starts with ``YYYY-MM``."""
        with self.session_factory() as session:
            statement = (
                select(HabitLog, Habit)
                .join(Habit, Habit.id == HabitLog.habit_id)  # type: ignore[arg-type]
                .where(HabitLog.user_id == user_id)
                .where(HabitLog.date.startswith(f"{month}-", autoescape=True))  # type: ignore[attr-defined]
                .order_by(HabitLog.date, HabitLog.habit_id)  # type: ignore[arg-type]
            )
            rows = [(log, habit) for log, habit in session.exec(statement).all()]
            session.expunge_all()
            return rows

    def list_logs(self, *, user_id: int) -> list[tuple[HabitLog, Habit]]:
        """Return every (log, habit) pair of a user ordered by date."""
        with self.session_factory() as session:
            statement = (
                select(HabitLog, Habit)
                .join(Habit, Habit.id == HabitLog.habit_id)  # type: ignore[arg-type]
                .where(HabitLog.user_id == user_id)
                .order_by(HabitLog.date, HabitLog.habit_id)  # type: ignore[arg-type]
            )
            rows = [(log, habit) for log, habit in session.exec(statement).all()]
            session.expunge_all()
            return rows

    def count_habits(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            return session.exec(
                select(func.count()).select_from(Habit).where(Habit.user_id == user_id)
            ).one()

    def count_logs(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            return session.exec(
                select(func.count()).select_from(HabitLog).where(HabitLog.user_id == user_id)
            ).one()

    @staticmethod
    def _log_key_query(habit_id: int, log_date: str, user_id: int):
        return (
            select(HabitLog)
            .where(HabitLog.user_id == user_id)
            .where(HabitLog.habit_id == habit_id)
            .where(HabitLog.date == log_date)
        )
