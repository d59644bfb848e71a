"""Habit registry service rules."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from trackitall.errors import NotFoundError, TransientError, ValidationError
from trackitall.services import habits as habit_service


def test_create_applies_defaults_and_trims(habit_repo, user):
    habit = habit_service.create_habit(habit_repo, user_id=user.id, name="  Meditate  ")

    assert habit.name == "Meditate"
    assert habit.category == "General"
    assert habit.color == "#22c55e"
    assert habit.user_id == user.id


@pytest.mark.parametrize("name", [None, "", "   "])
def test_create_requires_name(habit_repo, user, name):
    with pytest.raises(ValidationError):
        habit_service.create_habit(habit_repo, user_id=user.id, name=name)


def test_rename_keeps_logs_attached(habit_repo, habit_factory, user):
    habit = habit_factory(name="Old")
    habit_repo.upsert_log(habit.id, "2025-01-01", True, user_id=user.id)

    habit_service.update_habit(habit_repo, user_id=user.id, habit_id=habit.id, changes={"name": "New"})

    [(log, joined)] = habit_repo.list_logs(user_id=user.id)
    assert log.habit_id == habit.id
    assert joined.name == "New"


def test_update_rejects_blank_name(habit_repo, habit_factory, user):
    habit = habit_factory()

    with pytest.raises(ValidationError):
        habit_service.update_habit(habit_repo, user_id=user.id, habit_id=habit.id, changes={"name": " "})


def test_update_unknown_habit(habit_repo, user):
    with pytest.raises(NotFoundError):
        habit_service.update_habit(habit_repo, user_id=user.id, habit_id=404, changes={"color": "#000"})


def test_delete_reports_logs_removed(habit_repo, habit_factory, user):
    habit = habit_factory()
    habit_repo.upsert_log(habit.id, "2025-01-01", True, user_id=user.id)

    assert habit_service.delete_habit(habit_repo, user_id=user.id, habit_id=habit.id) == 1
    with pytest.raises(NotFoundError):
        habit_service.delete_habit(habit_repo, user_id=user.id, habit_id=habit.id)


def test_delete_retry_sweeps_orphaned_logs(habit_repo, user):
    class HalfDeletedRepo:
        """Habit row already gone, logs still present."""

        def delete_with_logs(self, habit_id, *, user_id):
            return False, 2

    assert habit_service.delete_habit(HalfDeletedRepo(), user_id=user.id, habit_id=7) == 2


def test_delete_storage_failure_is_transient(user):
    class BrokenRepo:
        def delete_with_logs(self, habit_id, *, user_id):
            raise OperationalError("DELETE FROM habit_log", {}, Exception("database is locked"))

    with pytest.raises(TransientError):
        habit_service.delete_habit(BrokenRepo(), user_id=user.id, habit_id=1)
