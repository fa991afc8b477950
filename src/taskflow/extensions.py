"""Repository wiring for the Flask application."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .domain.repositories import TaskRepository
from .infra.database import bootstrap_database
from .infra.repositories import InMemoryTaskRepository, SQLModelTaskRepository
from .logging_config import get_logger

logger = get_logger(__name__)

EXTENSION_KEY = "taskflow.repository"


def build_repository(config: BaseConfig) -> TaskRepository:
    """Create the repository selected by ``config.STORAGE_BACKEND``."""

    if config.STORAGE_BACKEND == "memory":
        return InMemoryTaskRepository()
    _, session_factory = bootstrap_database(config)
    return SQLModelTaskRepository(session_factory)


def init_repository(app: Flask, repository: TaskRepository | None = None) -> TaskRepository:
    """Attach a repository to ``app``; built from the app config when not given."""

    config: BaseConfig = app.config["TASKFLOW_CONFIG"]
    if repository is None:
        repository = build_repository(config)
    app.extensions[EXTENSION_KEY] = repository
    logger.info(
        "Repository ready",
        extra={"backend": type(repository).__name__, "storage": config.STORAGE_BACKEND},
    )
    return repository


def get_repository() -> TaskRepository:
    """Return the repository of the active application."""

    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError:  # pragma: no cover - exercised only on misconfigured apps
        raise RuntimeError("Repository not initialized") from None
