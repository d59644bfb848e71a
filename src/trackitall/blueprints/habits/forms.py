"""Habit and check-in form definitions."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator

from ..forms import JSONForm


class HabitForm(JSONForm):
    """Payload for creating a habit or patching some of its fields."""

    name: Optional[str] = Field(default=None, description="Short label for the habit", max_length=120)
    category: Optional[str] = Field(default=None, max_length=60)
    color: Optional[str] = Field(default=None, max_length=32)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        """A name, when sent, must have visible characters."""

        if value is not None and not value.strip():
            raise ValueError("Please provide a habit name.")
        return value

    def changes(self) -> dict:
        """Only the fields the client actually sent."""

        return self.model_dump(exclude_unset=True)


class CheckInForm(JSONForm):
    """Raw check-in payload; the service validates the day after the ownership check."""

    date: Any = Field(default=None, description="Calendar day as YYYY-MM-DD")
    completed: Any = None


class MonthQuery(JSONForm):
    month: Optional[str] = Field(default=None, description="Calendar month as YYYY-MM")


__all__ = ["CheckInForm", "HabitForm", "MonthQuery"]
