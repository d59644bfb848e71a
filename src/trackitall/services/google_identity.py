"""Google ID-token verification for federated sign-in."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

if TYPE_CHECKING:  # pragma: no cover
    from ..config import BaseConfig


class CredentialRejected(ValueError):
    """The Google credential could not be verified for this audience."""


@dataclass(frozen=True, slots=True)
class GoogleIdentity:
    subject: str
    email: str
    name: Optional[str] = None


def build_google_verifier(config: BaseConfig) -> Callable[[str], GoogleIdentity]:
    """Return a callable that turns a Google ID token into a GoogleIdentity."""

    audience = config.GOOGLE_CLIENT_ID

    def verify(credential: str) -> GoogleIdentity:
        if not audience:
            raise CredentialRejected("Google sign-in is not configured")
        try:
            payload = id_token.verify_oauth2_token(
                credential, google_requests.Request(), audience=audience
            )
        except (ValueError, GoogleAuthError) as exc:
            raise CredentialRejected("Google credential rejected") from exc

        email = payload.get("email")
        if not email or payload.get("email_verified") is False:
            raise CredentialRejected("Google account has no verified email")
        return GoogleIdentity(subject=str(payload["sub"]), email=email, name=payload.get("name"))

    return verify
