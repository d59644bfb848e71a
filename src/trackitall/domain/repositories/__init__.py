"""Repository protocols."""

from .habit import HabitRepository
from .user import UserRepository

__all__ = ["HabitRepository", "UserRepository"]
