"""Token, password and OTP handling."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from trackitall import config as config_module
from trackitall.errors import (
    ConflictError,
    ExpiredError,
    TransientError,
    UnauthorizedError,
    ValidationError,
)
from trackitall.services import auth
from trackitall.services.mailer import MailDeliveryError


@pytest.fixture
def settings(test_env):
    return config_module.TestingConfig()


class _Outbox:
    def __init__(self):
        self.sent = []

    def send(self, *, to, subject, text, html=None):
        self.sent.append((to, subject, text))


def _otp_from(outbox: _Outbox) -> str:
    text = outbox.sent[-1][2]
    return text.split("is: ")[1][:6]


def test_token_round_trip(user_repo, user, settings):
    token = auth.issue_token(user, settings)

    assert auth.resolve_token(token, users=user_repo, config=settings).id == user.id


def test_expired_token_rejected(user_repo, user, settings):
    past = datetime.now(timezone.utc) - timedelta(days=1)
    token = jwt.encode(
        {"sub": str(user.id), "exp": int(past.timestamp())},
        settings.SECRET_KEY,
        algorithm=settings.TOKEN_ALGORITHM,
    )

    with pytest.raises(UnauthorizedError):
        auth.resolve_token(token, users=user_repo, config=settings)


def test_token_signed_with_other_key_rejected(user_repo, user, settings):
    token = jwt.encode({"sub": str(user.id)}, "not-the-key", algorithm="HS256")

    with pytest.raises(UnauthorizedError):
        auth.resolve_token(token, users=user_repo, config=settings)


def test_token_for_deleted_account_rejected(user_repo, user, settings):
    token = auth.issue_token(user, settings)
    user_repo.delete_with_data(user.id)

    with pytest.raises(UnauthorizedError, match="no longer exists"):
        auth.resolve_token(token, users=user_repo, config=settings)


def test_register_hashes_password_and_defaults_name(user_repo, settings):
    result = auth.register(users=user_repo, config=settings, email=" bob@example.com ", password="pw")

    assert result.user.email == "bob@example.com"
    assert result.user.name == "bob"
    assert result.user.password_hash != "pw"
    assert result.user.provider == "local"


def test_register_duplicate_email(user_repo, user, settings):
    with pytest.raises(ConflictError):
        auth.register(users=user_repo, config=settings, email=user.email, password="pw")


@pytest.mark.parametrize(("email", "password"), [("", "pw"), ("a@b.c", ""), (None, None)])
def test_register_requires_email_and_password(user_repo, settings, email, password):
    with pytest.raises(ValidationError):
        auth.register(users=user_repo, config=settings, email=email, password=password)


def test_login_checks_password(user_repo, user_factory, settings):
    created = user_factory(email="carol@example.com", password="right")

    assert auth.login(users=user_repo, config=settings, email=created.email, password="right").user.id == created.id
    with pytest.raises(UnauthorizedError, match="Invalid credentials"):
        auth.login(users=user_repo, config=settings, email=created.email, password="wrong")
    with pytest.raises(UnauthorizedError, match="Invalid credentials"):
        auth.login(users=user_repo, config=settings, email="nobody@example.com", password="right")


def test_generate_otp_is_six_digits():
    for _ in range(50):
        otp = auth.generate_otp()
        assert len(otp) == 6 and otp.isdigit() and otp[0] != "0"


def test_reset_flow_with_otp(user_repo, user_factory, settings):
    created = user_factory(email="dave@example.com", password="old")
    outbox = _Outbox()

    message = auth.request_password_reset(users=user_repo, config=settings, mailer=outbox, email=created.email)
    otp = _otp_from(outbox)
    stored = user_repo.get_by_email(created.email)

    assert message == auth.FORGOT_PASSWORD_MESSAGE
    assert outbox.sent[0][0] == created.email
    assert stored.reset_otp_hash and otp not in stored.reset_otp_hash

    auth.reset_password_with_otp(
        users=user_repo, config=settings, email=created.email, otp=otp, new_password="new"
    )

    assert auth.login(users=user_repo, config=settings, email=created.email, password="new")
    cleared = user_repo.get_by_email(created.email)
    assert cleared.reset_otp_hash is None and cleared.reset_otp_expires_at is None
    with pytest.raises(UnauthorizedError, match="No active reset request"):
        auth.reset_password_with_otp(
            users=user_repo, config=settings, email=created.email, otp=otp, new_password="again"
        )


def test_forgot_password_is_silent_for_unknown_email(user_repo, settings):
    outbox = _Outbox()

    message = auth.request_password_reset(
        users=user_repo, config=settings, mailer=outbox, email="ghost@example.com"
    )

    assert message == auth.FORGOT_PASSWORD_MESSAGE
    assert outbox.sent == []


def test_wrong_otp_rejected(user_repo, user_factory, settings):
    created = user_factory(email="erin@example.com")
    outbox = _Outbox()
    auth.request_password_reset(users=user_repo, config=settings, mailer=outbox, email=created.email)
    wrong = "100000" if _otp_from(outbox) != "100000" else "100001"

    with pytest.raises(UnauthorizedError, match="Invalid OTP"):
        auth.reset_password_with_otp(
            users=user_repo, config=settings, email=created.email, otp=wrong, new_password="x"
        )


def test_expired_otp_rejected(user_repo, user_factory, settings):
    created = user_factory(email="fay@example.com")
    outbox = _Outbox()
    auth.request_password_reset(users=user_repo, config=settings, mailer=outbox, email=created.email)
    otp = _otp_from(outbox)
    stored = user_repo.get_by_email(created.email)
    stored.reset_otp_expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    user_repo.save(stored)

    with pytest.raises(ExpiredError):
        auth.reset_password_with_otp(
            users=user_repo, config=settings, email=created.email, otp=otp, new_password="x"
        )


def test_mail_failure_is_transient(user_repo, user_factory, settings):
    class DownMailer:
        def send(self, **kwargs):
            raise MailDeliveryError("smtp down")

    created = user_factory(email="gus@example.com")

    with pytest.raises(TransientError):
        auth.request_password_reset(
            users=user_repo, config=settings, mailer=DownMailer(), email=created.email
        )
