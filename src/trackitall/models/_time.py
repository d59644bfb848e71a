"""Timestamp helpers shared by table models."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC instant; tables store it for created/updated stamps."""

    return datetime.now(timezone.utc)
