"""TrackItAll application factory."""

from __future__ import annotations

import os
from importlib import import_module
from typing import Callable, Iterable, Optional

from flask import Flask
from flask_cors import CORS

from . import cli as _cli
from .config import BaseConfig, DevConfig, ProductionConfig, TestingConfig
from .errors import register_error_handlers
from .extensions import init_services
from .logging_config import setup_logging
from .services.google_identity import GoogleIdentity
from .services.mailer import Mailer

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return DevConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths(config: BaseConfig) -> Iterable[str]:
    """Yield blueprint import paths; the client catch-all must come last."""

    yield "trackitall.blueprints.auth"
    yield "trackitall.blueprints.habits"
    yield "trackitall.blueprints.users"
    if config.SERVE_CLIENT:
        yield "trackitall.blueprints.client"


def create_app(
    config_name: str | None = None,
    *,
    mailer: Optional[Mailer] = None,
    google_verifier: Optional[Callable[[str], GoogleIdentity]] = None,
) -> Flask:
    """Create and configure the Flask application instance.

    ``mailer`` and ``google_verifier`` replace the SMTP transport and the
    Google token check, which tests and local tooling rely on.
    """

    # No built-in /static route; the client blueprint owns bundle paths.
    app = Flask(__name__, instance_relative_config=True, static_folder=None)
    config_cls = _resolve_config(config_name or os.getenv("TRACKITALL_ENV"))
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config["TRACKITALL_CONFIG"] = config_obj
    app.json.sort_keys = False

    setup_logging(config_obj)
    register_error_handlers(app)
    CORS(app, resources={r"/api/*": {"origins": config_obj.CORS_ORIGINS}})
    init_services(app, config_obj, mailer=mailer, google_verifier=google_verifier)
    _register_blueprints(app, config_obj)
    _cli.init_app(app)

    return app


def _register_blueprints(app: Flask, config: BaseConfig) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths(config):
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "ProductionConfig", "TestingConfig", "create_app"]
