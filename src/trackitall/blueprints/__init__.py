"""Blueprint exports."""

from . import auth, client, habits, users

__all__ = [
    "auth",
    "client",
    "habits",
    "users",
]
