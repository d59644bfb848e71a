"""Habits blueprint package."""

from __future__ import annotations

from flask import Blueprint

from ..auth.guard import authenticate_request

bp = Blueprint("habits", __name__, url_prefix="/api/habits")
bp.before_request(authenticate_request)

from . import routes  # noqa: E402,F401 - import routes for registration

__all__ = ["bp"]
