"""Habit registry, check-in and statistics routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_services
from ...serializers import habit_to_dict, log_to_dict
from ...services import checkins, stats
from ...services import habits as habit_service
from ..auth.guard import current_user
from . import bp
from .forms import CheckInForm, HabitForm, MonthQuery


@bp.get("")
def list_habits():
    """List the caller's habits, oldest first."""

    habits = habit_service.list_habits(get_services().habits, user_id=current_user().id)
    return jsonify([habit_to_dict(habit) for habit in habits])


@bp.post("")
def create_habit():
    form = HabitForm.from_json()
    habit = habit_service.create_habit(
        get_services().habits,
        user_id=current_user().id,
        name=form.name,
        category=form.category,
        color=form.color,
    )
    return jsonify(habit_to_dict(habit)), 201


@bp.patch("/<int:habit_id>")
def update_habit(habit_id: int):
    form = HabitForm.from_json()
    habit = habit_service.update_habit(
        get_services().habits,
        user_id=current_user().id,
        habit_id=habit_id,
        changes=form.changes(),
    )
    return jsonify(habit_to_dict(habit))


@bp.delete("/<int:habit_id>")
def delete_habit(habit_id: int):
    """Delete a habit and all of its logs."""

    habit_service.delete_habit(get_services().habits, user_id=current_user().id, habit_id=habit_id)
    return jsonify({"message": "Habit deleted"})


@bp.get("/logs")
def month_logs():
    """Logs for one month, each with its habit embedded."""

    query = MonthQuery.from_query()
    stats.parse_month(query.month)
    rows = get_services().habits.list_logs_for_month(query.month, user_id=current_user().id)
    return jsonify([log_to_dict(log, habit) for log, habit in rows])


@bp.get("/stats")
def month_stats():
    query = MonthQuery.from_query()
    payload = stats.dashboard_stats(
        get_services().habits, user_id=current_user().id, month=query.month
    )
    return jsonify(payload)


@bp.post("/<int:habit_id>/log")
def set_check_in(habit_id: int):
    """Set the completion flag for one habit on one day."""

    form = CheckInForm.from_json()
    result = checkins.set_check_in(
        get_services().habits,
        user_id=current_user().id,
        habit_id=habit_id,
        log_date=form.date,
        completed=form.completed,
    )
    return jsonify(log_to_dict(result.log, result.habit))
