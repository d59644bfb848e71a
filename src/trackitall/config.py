"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "TrackItAll"
    DB_FILENAME = "trackitall.db"
    TOKEN_ALGORITHM = "HS256"
    TOKEN_TTL_DAYS = 7
    OTP_TTL_MINUTES = 10
    DEFAULT_EMAIL_FROM = '"TrackItAll" <no-reply@trackitall.app>'
    SQLITE_PRAGMAS = {"foreign_keys": "on"}

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("TRACKITALL_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("TRACKITALL_DEV_MODE", default=True)
        self.ENVIRONMENT = os.getenv("TRACKITALL_ENV", "development").strip().lower()
        self.DATABASE_URL = os.getenv("TRACKITALL_DATABASE_URL", self._build_sqlite_url())
        self.PORT = _env_int("TRACKITALL_PORT", 5000)
        self.GOOGLE_CLIENT_ID = os.getenv("TRACKITALL_GOOGLE_CLIENT_ID")
        self.SMTP_HOST = os.getenv("TRACKITALL_SMTP_HOST")
        self.SMTP_PORT = _env_int("TRACKITALL_SMTP_PORT", 587)
        self.SMTP_USER = os.getenv("TRACKITALL_SMTP_USER")
        self.SMTP_PASS = os.getenv("TRACKITALL_SMTP_PASS")
        self.EMAIL_FROM = os.getenv("TRACKITALL_EMAIL_FROM", self.DEFAULT_EMAIL_FROM)
        self.CORS_ORIGINS = _env_list("TRACKITALL_CORS_ORIGINS", ["*"])
        self.CLIENT_BUILD_DIR = Path(
            os.getenv("TRACKITALL_CLIENT_BUILD_DIR", "client/build")
        ).expanduser()
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("TRACKITALL_SECRET_KEY must be set in non-dev mode.")

    @property
    def SERVE_CLIENT(self) -> bool:
        """Serve the prebuilt client bundle only in production deployments."""

        return self.ENVIRONMENT == "production"

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("TRACKITALL_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite."""

    DEBUG = False
    TESTING = True


class ProductionConfig(BaseConfig):
    """Deployed configuration; also serves the client bundle."""

    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        super().__init__()
        self.ENVIRONMENT = "production"
