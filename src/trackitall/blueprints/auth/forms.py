"""Authentication payloads."""

from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict, Field

from ..forms import JSONForm


class RegisterForm(JSONForm):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginForm(JSONForm):
    email: Optional[str] = None
    password: Optional[str] = None


class GoogleSignInForm(JSONForm):
    credential: Optional[str] = None


class ForgotPasswordForm(JSONForm):
    email: Optional[str] = None


class ResetPasswordForm(JSONForm):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    email: Optional[str] = None
    otp: Optional[str] = Field(default=None, description="Six-digit code from the reset email")
    new_password: Optional[str] = Field(default=None, alias="newPassword")


__all__ = [
    "ForgotPasswordForm",
    "GoogleSignInForm",
    "LoginForm",
    "RegisterForm",
    "ResetPasswordForm",
]
