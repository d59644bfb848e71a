"""Database and collaborator wiring for the Flask app."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from flask import Flask, current_app

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelUserRepository
from .services.google_identity import GoogleIdentity, build_google_verifier
from .services.mailer import Mailer, build_mailer

EXTENSION_KEY = "trackitall"


@dataclass
class AppServices:
    """Per-app collaborators resolved by the blueprints."""

    config: BaseConfig
    engine: object
    session_factory: SessionFactory
    users: SQLModelUserRepository
    habits: SQLModelHabitRepository
    mailer: Mailer
    verify_google_credential: Callable[[str], GoogleIdentity]


def init_services(
    app: Flask,
    config: BaseConfig,
    *,
    mailer: Optional[Mailer] = None,
    google_verifier: Optional[Callable[[str], GoogleIdentity]] = None,
) -> AppServices:
    """Initialize the engine, repositories and external collaborators."""

    engine, session_factory = bootstrap_database(config)
    services = AppServices(
        config=config,
        engine=engine,
        session_factory=session_factory,
        users=SQLModelUserRepository(session_factory),
        habits=SQLModelHabitRepository(session_factory),
        mailer=mailer or build_mailer(config),
        verify_google_credential=google_verifier or build_google_verifier(config),
    )
    app.extensions[EXTENSION_KEY] = services

    return services


def get_services() -> AppServices:
    """Return the services bound to the current Flask app."""

    services = current_app.extensions.get(EXTENSION_KEY)
    if services is None:  # pragma: no cover - exercised in integration tests
        raise RuntimeError("Application services not initialized")
    return services
