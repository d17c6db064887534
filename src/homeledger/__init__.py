"""HomeLedger application factory."""

from __future__ import annotations

import os
from importlib import import_module
from typing import Iterable

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, ProductionConfig, TestConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "production": ProductionConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "homeledger.blueprints.health"
    yield "homeledger.blueprints.users"
    yield "homeledger.blueprints.transactions"
    yield "homeledger.blueprints.assets"
    yield "homeledger.blueprints.card_payments"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_cls = _resolve_config(config_name or os.getenv("HOMELEDGER_CONFIG"))
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config["HOMELEDGER_CONFIG"] = config_obj
    app.json.sort_keys = False

    from .blueprints.api import register_api_hooks
    from .extensions import init_db
    from .logging_config import setup_logging

    setup_logging(config_obj)
    register_api_hooks(app)
    _register_blueprints(app)
    init_db(app)
    _cli.init_app(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["create_app"]
