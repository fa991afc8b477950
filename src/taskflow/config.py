"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = ("sqlite", "memory")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "TaskFlow"
    DB_FILENAME = "taskflow.db"
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("TASKFLOW_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("TASKFLOW_DEV_MODE", default=True)
        self.STORAGE_BACKEND = self._resolve_storage()
        self.DATABASE_URL = os.getenv("TASKFLOW_DATABASE_URL", self._build_sqlite_url())
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("TASKFLOW_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the SQLite file and logs."""

        data_root = os.getenv("TASKFLOW_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _resolve_storage(self) -> str:
        backend = os.getenv("TASKFLOW_STORAGE", "sqlite").strip().lower()
        if backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"TASKFLOW_STORAGE must be one of {', '.join(STORAGE_BACKENDS)}; got {backend!r}"
            )
        return backend

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Engine kwargs; SQLite connections are shared across Flask threads."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration for the test suite: in-memory storage, no debug server."""

    TESTING = True

    def _resolve_storage(self) -> str:
        return "memory"


__all__ = ["BaseConfig", "DevConfig", "STORAGE_BACKENDS", "TestConfig"]
