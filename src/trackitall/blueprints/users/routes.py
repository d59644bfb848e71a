"""Profile, export and account deletion routes."""

from __future__ import annotations

from flask import Response, jsonify

from ...extensions import get_services
from ...serializers import user_to_dict
from ...services import accounts
from ...services.export_csv import CSV_FILENAME
from ..auth.guard import current_user
from . import bp
from .forms import ExportQuery, ProfileForm


@bp.get("/me")
def me():
    """Profile with habit and log counts."""

    return jsonify(accounts.profile(current_user(), habits=get_services().habits))


@bp.patch("/me")
def update_me():
    form = ProfileForm.from_json()
    user = accounts.rename_user(current_user(), form.name, users=get_services().users)
    return jsonify(user_to_dict(user))


@bp.get("/me/export")
def export_me():
    """Download every log as CSV."""

    query = ExportQuery.from_query()
    lines = accounts.export_logs(
        current_user(), habits=get_services().habits, export_format=query.format
    )
    return Response(
        lines,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


@bp.delete("/me")
def delete_me():
    """Delete the account with all habits and logs."""

    accounts.delete_account(current_user(), users=get_services().users)
    return jsonify({"message": "Account and all data deleted"})
