"""Habit tracking data structures."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from ._time import utcnow

DEFAULT_CATEGORY = "General"
DEFAULT_COLOR = "#22c55e"


class Habit(SQLModel, table=True):
    """A user-defined habit checked in once per calendar day."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=120)
    category: str = Field(default=DEFAULT_CATEGORY, nullable=False, max_length=60)
    color: str = Field(default=DEFAULT_COLOR, nullable=False, max_length=32)
    # Doubles as the habit's start date.
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)


class HabitLog(SQLModel, table=True):
    """Check-in for one habit on one calendar day.

    ``date`` is kept as ``YYYY-MM-DD`` text rather than an instant so month
    queries are prefix matches and no time zone is involved. ``user_id`` is
    redundant with the habit's owner and lets user-scoped listing, export and
    cascades skip the habit table.
    """

    __tablename__: ClassVar[str] = "habit_log"
    __table_args__ = (
        UniqueConstraint("habit_id", "user_id", "date", name="uq_habit_log_habit_user_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    date: str = Field(nullable=False, max_length=10, index=True)
    completed: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
