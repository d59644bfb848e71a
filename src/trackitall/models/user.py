"""User model supporting password and Google sign-in."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ._time import utcnow


class User(SQLModel, table=True):
    """Account owner; habits and logs cascade away with it."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = Field(default=None, max_length=120)
    email: str = Field(nullable=False, unique=True, index=True, max_length=320)
    password_hash: Optional[str] = Field(default=None, max_length=255)
    google_id: Optional[str] = Field(default=None, index=True, max_length=255)
    reset_otp_hash: Optional[str] = Field(default=None, max_length=255)
    reset_otp_expires_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    @property
    def provider(self) -> str:
        return "google" if self.google_id else "local"
