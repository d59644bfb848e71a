"""Profile, export and account deletion for the signed-in user."""

from __future__ import annotations

from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..domain.repositories import HabitRepository, UserRepository
from ..errors import TransientError, ValidationError
from ..logging_config import get_logger
from ..models.user import User
from ..serializers import isoformat
from .export_csv import iter_logs_csv, resolve_export_format

logger = get_logger(__name__)


def profile(user: User, *, habits: HabitRepository) -> dict:
    """Profile fields plus habit and log counts."""

    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "createdAt": isoformat(user.created_at),
        "provider": user.provider,
        "stats": {
            "habitsCount": habits.count_habits(user_id=user.id),  # type: ignore[arg-type]
            "logsCount": habits.count_logs(user_id=user.id),  # type: ignore[arg-type]
        },
    }


def rename_user(user: User, name: Optional[str], *, users: UserRepository) -> User:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required")
    user.name = cleaned
    return users.save(user)


def export_logs(user: User, *, habits: HabitRepository, export_format: Optional[str]) -> Iterator[str]:
    """Return the CSV lines for every log the user owns, oldest day first."""

    resolve_export_format(export_format)
    rows = habits.list_logs(user_id=user.id)  # type: ignore[arg-type]
    logger.info("Log export prepared", extra={"user_id": user.id, "rows": len(rows)})
    return iter_logs_csv(rows)


def delete_account(user: User, *, users: UserRepository) -> None:
    """Remove the user's logs, habits and the account itself."""

    try:
        users.delete_with_data(user.id)  # type: ignore[arg-type]
    except SQLAlchemyError as exc:
        logger.exception("Account cascade failed", extra={"user_id": user.id})
        raise TransientError("Deleting the account did not finish, please retry") from exc


__all__ = ["delete_account", "export_logs", "profile", "rename_user"]
