"""Authentication: passwords, session tokens, Google sign-in and OTP reset."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError

from ..domain.repositories import UserRepository
from ..errors import (
    ConflictError,
    ExpiredError,
    TransientError,
    UnauthorizedError,
    ValidationError,
)
from ..logging_config import get_logger
from ..models.user import User
from .google_identity import CredentialRejected, GoogleIdentity
from .mailer import MailDeliveryError, Mailer

if TYPE_CHECKING:  # pragma: no cover
    from ..config import BaseConfig

logger = get_logger(__name__)

_hasher = PasswordHasher()

FORGOT_PASSWORD_MESSAGE = "If a password account exists for this email, a reset code has been sent."
PASSWORD_UPDATED_MESSAGE = "Password updated successfully"
OTP_EMAIL_SUBJECT = "TrackItAll Password Reset OTP"


@dataclass(frozen=True)
class AuthResult:
    token: str
    user: User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _verify(hashed: str, secret: str) -> bool:
    try:
        return _hasher.verify(hashed, secret)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def issue_token(user: User, config: BaseConfig) -> str:
    """Sign a session token carrying the user id."""

    now = _utcnow()
    claims = {
        "sub": str(user.id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=config.TOKEN_TTL_DAYS)).timestamp()),
    }
    return jwt.encode(claims, config.SECRET_KEY, algorithm=config.TOKEN_ALGORITHM)


def resolve_token(token: str, *, users: UserRepository, config: BaseConfig) -> User:
    """Return the user a session token belongs to, or raise UnauthorizedError."""

    try:
        claims = jwt.decode(token, config.SECRET_KEY, algorithms=[config.TOKEN_ALGORITHM])
    except JWTError as exc:
        raise UnauthorizedError("Invalid or expired session token") from exc

    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid or expired session token") from None

    user = users.get_by_id(user_id)
    if user is None:
        raise UnauthorizedError("Account no longer exists")
    return user


def _auth_result(user: User, config: BaseConfig) -> AuthResult:
    return AuthResult(token=issue_token(user, config), user=user)


def register(
    *,
    users: UserRepository,
    config: BaseConfig,
    email: Optional[str],
    password: Optional[str],
    name: Optional[str] = None,
) -> AuthResult:
    """Create a password account and sign it in."""

    email = (email or "").strip()
    if not email or not password:
        raise ValidationError("Email & password required")
    if users.get_by_email(email) is not None:
        raise ConflictError("User already exists")

    user = User(
        name=(name or "").strip() or email.split("@")[0],
        email=email,
        password_hash=hash_password(password),
    )
    try:
        user = users.create(user)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        raise ConflictError("User already exists") from None
    logger.info("User registered", extra={"user_id": user.id, "provider": "local"})
    return _auth_result(user, config)


def login(
    *,
    users: UserRepository,
    config: BaseConfig,
    email: Optional[str],
    password: Optional[str],
) -> AuthResult:
    """Validate credentials and return a fresh session token."""

    email = (email or "").strip()
    user = users.get_by_email(email) if email else None
    if user is None or not user.password_hash or not _verify(user.password_hash, password or ""):
        logger.info("Login rejected")
        raise UnauthorizedError("Invalid credentials")
    logger.info("User logged in", extra={"user_id": user.id})
    return _auth_result(user, config)


def google_sign_in(
    *,
    users: UserRepository,
    config: BaseConfig,
    verifier: Callable[[str], GoogleIdentity],
    credential: Optional[str],
) -> AuthResult:
    """Sign in with a Google ID token, creating or linking the account."""

    if not credential:
        raise ValidationError("Missing credential")
    try:
        identity = verifier(credential)
    except CredentialRejected as exc:
        logger.info("Google credential rejected", extra={"reason": str(exc)})
        raise UnauthorizedError("Google sign-in failed") from exc

    user = users.get_by_email(identity.email)
    if user is None:
        user = users.create(
            User(
                name=identity.name or identity.email.split("@")[0],
                email=identity.email,
                google_id=identity.subject,
            )
        )
        logger.info("User registered", extra={"user_id": user.id, "provider": "google"})
    elif not user.google_id:
        user.google_id = identity.subject
        user = users.save(user)
        logger.info("Google identity linked", extra={"user_id": user.id})
    return _auth_result(user, config)


def generate_otp() -> str:
    """Six decimal digits from a CSPRNG."""

    return str(100000 + secrets.randbelow(900000))


def request_password_reset(
    *,
    users: UserRepository,
    config: BaseConfig,
    mailer: Mailer,
    email: Optional[str],
) -> str:
    """Mail a reset OTP to password accounts.

    The returned message is identical whether or not the account exists.
    """

    email = (email or "").strip()
    if not email:
        raise ValidationError("Email is required")

    user = users.get_by_email(email)
    if user is None or not user.password_hash:
        logger.info("Password reset requested for an account without a password")
        return FORGOT_PASSWORD_MESSAGE

    otp = generate_otp()
    user.reset_otp_hash = _hasher.hash(otp)
    user.reset_otp_expires_at = _utcnow() + timedelta(minutes=config.OTP_TTL_MINUTES)
    user = users.save(user)

    text = (
        f"Your OTP to reset your TrackItAll password is: {otp}\n\n"
        f"This code is valid for {config.OTP_TTL_MINUTES} minutes. "
        "If you did not request this, you can ignore this email."
    )
    try:
        mailer.send(to=user.email, subject=OTP_EMAIL_SUBJECT, text=text)
    except MailDeliveryError as exc:
        logger.exception("Reset OTP email failed", extra={"user_id": user.id})
        raise TransientError("Could not send the reset code, please retry") from exc

    logger.info("Reset OTP issued", extra={"user_id": user.id})
    return FORGOT_PASSWORD_MESSAGE


def reset_password_with_otp(
    *,
    users: UserRepository,
    config: BaseConfig,
    email: Optional[str],
    otp: Optional[str],
    new_password: Optional[str],
) -> AuthResult:
    """Swap the password when the OTP matches and has not expired."""

    email = (email or "").strip()
    if not email or not otp or not new_password:
        raise ValidationError("All fields are required")

    user = users.get_by_email(email)
    if user is None or not user.password_hash:
        raise UnauthorizedError("Invalid request")
    if not user.reset_otp_hash or not user.reset_otp_expires_at:
        raise UnauthorizedError("No active reset request")
    if _utcnow() > _as_utc(user.reset_otp_expires_at):
        raise ExpiredError("OTP has expired")
    if not _verify(user.reset_otp_hash, str(otp)):
        raise UnauthorizedError("Invalid OTP")

    user.password_hash = hash_password(new_password)
    user.reset_otp_hash = None
    user.reset_otp_expires_at = None
    user = users.save(user)
    logger.info("Password reset with OTP", extra={"user_id": user.id})
    return _auth_result(user, config)


__all__ = [
    "AuthResult",
    "FORGOT_PASSWORD_MESSAGE",
    "PASSWORD_UPDATED_MESSAGE",
    "generate_otp",
    "google_sign_in",
    "hash_password",
    "issue_token",
    "login",
    "register",
    "request_password_reset",
    "reset_password_with_otp",
    "resolve_token",
]
