"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelHabitRepository",
    "SQLModelUserRepository",
]
