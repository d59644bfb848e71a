"""Authentication routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_services
from ...serializers import user_to_dict
from ...services import auth as auth_service
from . import bp
from .forms import (
    ForgotPasswordForm,
    GoogleSignInForm,
    LoginForm,
    RegisterForm,
    ResetPasswordForm,
)


def _session_payload(result: auth_service.AuthResult) -> dict:
    return {"token": result.token, "user": user_to_dict(result.user)}


@bp.post("/register")
def register():
    """Create a password account."""

    form = RegisterForm.from_json()
    services = get_services()
    result = auth_service.register(
        users=services.users,
        config=services.config,
        name=form.name,
        email=form.email,
        password=form.password,
    )
    return jsonify(_session_payload(result))


@bp.post("/login")
def login():
    form = LoginForm.from_json()
    services = get_services()
    result = auth_service.login(
        users=services.users,
        config=services.config,
        email=form.email,
        password=form.password,
    )
    return jsonify(_session_payload(result))


@bp.post("/google")
def google():
    """Sign in with a Google ID token."""

    form = GoogleSignInForm.from_json()
    services = get_services()
    result = auth_service.google_sign_in(
        users=services.users,
        config=services.config,
        verifier=services.verify_google_credential,
        credential=form.credential,
    )
    return jsonify(_session_payload(result))


@bp.post("/forgot-password")
def forgot_password():
    form = ForgotPasswordForm.from_json()
    services = get_services()
    message = auth_service.request_password_reset(
        users=services.users,
        config=services.config,
        mailer=services.mailer,
        email=form.email,
    )
    return jsonify({"message": message})


@bp.post("/reset-password-otp")
def reset_password_otp():
    form = ResetPasswordForm.from_json()
    services = get_services()
    result = auth_service.reset_password_with_otp(
        users=services.users,
        config=services.config,
        email=form.email,
        otp=form.otp,
        new_password=form.new_password,
    )
    payload = _session_payload(result)
    payload["message"] = auth_service.PASSWORD_UPDATED_MESSAGE
    return jsonify(payload)
