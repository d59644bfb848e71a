"""Account blueprint package."""

from __future__ import annotations

from flask import Blueprint

from ..auth.guard import authenticate_request

bp = Blueprint("users", __name__, url_prefix="/api/users")
bp.before_request(authenticate_request)

from . import routes  # noqa: E402,F401 - import routes for registration

__all__ = ["bp"]
