"""Account payloads."""

from __future__ import annotations

from typing import Optional

from ..forms import JSONForm


class ProfileForm(JSONForm):
    name: Optional[str] = None


class ExportQuery(JSONForm):
    format: Optional[str] = None


__all__ = ["ExportQuery", "ProfileForm"]
