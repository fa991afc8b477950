"""TaskFlow application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .domain.repositories import TaskRepository
from .logging_config import setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths."""

    yield "taskflow.blueprints.api"


def create_app(
    config_name: str | None = None,
    *,
    config: BaseConfig | None = None,
    repository: TaskRepository | None = None,
) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["TASKFLOW_CONFIG"] = config_obj

    if not config_obj.TESTING:
        setup_logging(config_obj)

    _register_blueprints(app)
    # Imported here so importing the factory does not touch the database layer.
    from .extensions import init_repository

    init_repository(app, repository)
    _cli.init_app(app)
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        app.register_blueprint(getattr(module, "bp"))
