"""Shared request-payload parsing for the JSON blueprints."""

from __future__ import annotations

from typing import TypeVar

from flask import request
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError

FormT = TypeVar("FormT", bound="JSONForm")


def _describe(exc: PydanticValidationError) -> str:
    messages = []
    for error in exc.errors(include_url=False):
        loc = ".".join(str(part) for part in error.get("loc", ())) or "body"
        messages.append(f"{loc}: {error.get('msg', 'Invalid value')}")
    return "; ".join(messages)


class JSONForm(BaseModel):
    """Base form; unknown keys are ignored and type errors become ValidationError."""

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def _validate(cls: type[FormT], payload: object) -> FormT:
        if not isinstance(payload, dict):
            payload = {}
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError(_describe(exc)) from None

    @classmethod
    def from_json(cls: type[FormT]) -> FormT:
        """Validate the JSON request body."""

        return cls._validate(request.get_json(silent=True))

    @classmethod
    def from_query(cls: type[FormT]) -> FormT:
        """Validate the query string."""

        return cls._validate(request.args.to_dict())
