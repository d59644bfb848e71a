"""Bearer-token enforcement for protected blueprints."""

from __future__ import annotations

from flask import g, request

from ...errors import UnauthorizedError
from ...extensions import get_services
from ...models.user import User
from ...services.auth import resolve_token


def authenticate_request() -> None:
    """Resolve the bearer token on the current request into ``g.current_user``."""

    if request.method == "OPTIONS":
        # CORS preflight carries no credentials
        return
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Not authorized, no token")
    services = get_services()
    g.current_user = resolve_token(token, users=services.users, config=services.config)


def current_user() -> User:
    return g.current_user


__all__ = ["authenticate_request", "current_user"]
