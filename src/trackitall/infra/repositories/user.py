"""SQLModel implementation of the user repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...logging_config import get_logger
from ...models._time import utcnow
from ...models.habit import Habit, HabitLog
from ...models.user import User
from ..database import SessionFactory

logger = get_logger(__name__)


class SQLModelUserRepository:
    """SQLModel-based user repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user:
                session.expunge(user)
            return user

    def get_by_email(self, email: str) -> Optional[User]:
        """Fetch a user by exact email."""
        with self.session_factory() as session:
            user = session.exec(select(User).where(User.email == email)).first()
            if user:
                session.expunge(user)
            return user

    def create(self, user: User) -> User:
        with self.session_factory() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def save(self, user: User) -> User:
        """Persist changes made to a detached user."""
        with self.session_factory() as session:
            user.updated_at = utcnow()
            merged = session.merge(user)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete_with_data(self, user_id: int) -> bool:
        """Delete a user's logs, habits and finally the user row.

        Every step is keyed by ``user_id`` so running it again after a
        partial failure finishes the job.
        """
        with self.session_factory() as session:
            logs = session.exec(select(HabitLog).where(HabitLog.user_id == user_id)).all()
            for log in logs:
                session.delete(log)
            session.flush()

            habits = session.exec(select(Habit).where(Habit.user_id == user_id)).all()
            for habit in habits:
                session.delete(habit)
            session.flush()

            user = session.get(User, user_id)
            if user is not None:
                session.delete(user)
            session.commit()

        logger.info(
            "Account cascade finished",
            extra={
                "user_id": user_id,
                "logs_deleted": len(logs),
                "habits_deleted": len(habits),
                "user_deleted": user is not None,
            },
        )
        return user is not None
