"""Pytest configuration and shared fixtures for TrackItAll tests.

This module provides database fixtures, test data factories, and a Flask
app wired to a throwaway SQLite file with fake mail and Google collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest

from trackitall import create_app
from trackitall.config import TestingConfig
from trackitall.infra.database import bootstrap_database, create_session_factory
from trackitall.infra.repositories import SQLModelHabitRepository, SQLModelUserRepository
from trackitall.models import Habit, User
from trackitall.services.auth import hash_password
from trackitall.services.google_identity import CredentialRejected, GoogleIdentity

# =============================================================================
# Collaborator fakes
# =============================================================================


@dataclass
class RecordingMailer:
    """Keeps sent messages in memory instead of talking to SMTP."""

    sent: list[dict] = field(default_factory=list)

    def send(self, *, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})


class FakeGoogleVerifier:
    """Accepts credentials registered in ``identities``; rejects anything else."""

    def __init__(self) -> None:
        self.identities: dict[str, GoogleIdentity] = {}

    def __call__(self, credential: str) -> GoogleIdentity:
        try:
            return self.identities[credential]
        except KeyError:
            raise CredentialRejected("unknown credential") from None


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def test_env(tmp_path, monkeypatch):
    """Point every TrackItAll setting at a per-test directory."""

    monkeypatch.setenv("TRACKITALL_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TRACKITALL_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("TRACKITALL_SECRET_KEY", "test-secret")
    monkeypatch.delenv("TRACKITALL_ENV", raising=False)
    return tmp_path


@pytest.fixture
def db_engine(test_env):
    """Engine for an isolated SQLite file with all tables created."""

    engine, _factory = bootstrap_database(TestingConfig())
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session-scope factory matching what repositories expect."""

    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def user_repo(session_factory) -> SQLModelUserRepository:
    return SQLModelUserRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(user_repo):
    """Factory for persisted password accounts."""

    counter = {"n": 0}

    def _create_user(
        email: str | None = None, password: str = "secret-pass", name: str = "Tester"
    ) -> User:
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        return user_repo.create(
            User(name=name, email=email, password_hash=hash_password(password))
        )

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default account for scoping data."""

    return user_factory(email="tester@example.com")


@pytest.fixture
def habit_factory(habit_repo, user):
    """Factory for persisted habits owned by ``user`` unless told otherwise."""

    def _create_habit(
        name: str = "Read",
        category: str = "General",
        color: str = "#22c55e",
        owner: User | None = None,
    ) -> Habit:
        owner = owner or user
        habit = Habit(user_id=owner.id, name=name, category=category, color=color)
        return habit_repo.create(habit, user_id=owner.id)

    return _create_habit


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def google_verifier() -> FakeGoogleVerifier:
    return FakeGoogleVerifier()


@pytest.fixture
def app(test_env, mailer, google_verifier):
    """Flask app on a temporary SQLite database."""

    application = create_app("testing", mailer=mailer, google_verifier=google_verifier)
    yield application
    application.extensions["trackitall"].engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register an account through the API and return its auth headers."""

    def _register(email: str = "alice@example.com", password: str = "pw-123456", name=None):
        payload = {"email": email, "password": password}
        if name is not None:
            payload["name"] = name
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 200, response.get_json()
        return {"Authorization": f"Bearer {response.get_json()['token']}"}

    return _register


@pytest.fixture
def auth_headers(register):
    return register()
