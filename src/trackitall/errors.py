"""Error taxonomy shared by services and HTTP handlers."""

from __future__ import annotations

from typing import ClassVar

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .logging_config import get_logger

logger = get_logger(__name__)


class TrackItAllError(Exception):
    """Base class for errors surfaced to API callers."""

    kind: ClassVar[str] = "Error"
    status_code: ClassVar[int] = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind, "message": self.message}


class ValidationError(TrackItAllError):
    """Malformed or missing input."""

    kind = "Validation"
    status_code = 400


class UnauthorizedError(TrackItAllError):
    """Missing/invalid session token or bad credentials."""

    kind = "Unauthorized"
    status_code = 401


class NotFoundError(TrackItAllError):
    """Entity does not exist or is not owned by the caller."""

    kind = "NotFound"
    status_code = 404


class ConflictError(TrackItAllError):
    kind = "Conflict"
    status_code = 409


class ExpiredError(TrackItAllError):
    kind = "Expired"
    status_code = 410


class TransientError(TrackItAllError):
    """Storage or cascade failure; the caller may retry."""

    kind = "Transient"
    status_code = 503


def register_error_handlers(app: Flask) -> None:
    """Render domain errors and storage failures as JSON bodies."""

    @app.errorhandler(TrackItAllError)
    def _handle_domain_error(exc: TrackItAllError):
        if exc.status_code >= 500:
            logger.warning("Request failed", extra={"kind": exc.kind})
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def _handle_storage_error(exc: SQLAlchemyError):
        logger.exception("Storage failure")
        error = TransientError("Storage is temporarily unavailable, please retry")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def _handle_missing_route(exc: HTTPException):
        error = NotFoundError("Resource not found")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(405)
    def _handle_bad_method(exc: HTTPException):
        return jsonify({"error": "MethodNotAllowed", "message": exc.description}), 405


__all__ = [
    "ConflictError",
    "ExpiredError",
    "NotFoundError",
    "TrackItAllError",
    "TransientError",
    "UnauthorizedError",
    "ValidationError",
    "register_error_handlers",
]
