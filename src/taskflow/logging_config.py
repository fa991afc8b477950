"""Logging for TaskFlow: readable console lines plus a rotating JSON log file."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .config import BaseConfig

LOGGER_NAMESPACE = "taskflow"
LOG_FILENAME = "taskflow.log"

# ``extra`` keys emitted by the repositories, routes and CLI; lifted to the top
# level of each JSON line.
RECORD_KEYS = ("record_id", "is_habit", "field", "value", "day")

_LOGRECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line: record keys at the top, other extras under ``context``."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = {
            key: value for key, value in vars(record).items() if key not in _LOGRECORD_ATTRS
        }
        for key in RECORD_KEYS:
            if key in context:
                entry[key] = context.pop(key)
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, _ = record.exc_info
            entry["error"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


def log_file_path(config: BaseConfig) -> Path:
    return Path(config.DATA_DIR) / "logs" / LOG_FILENAME


def _console_handler(dev_mode: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    if dev_mode:
        handler.setLevel(logging.INFO)
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)-8s %(name)s: %(message)s", "%H:%M:%S")
        )
    else:
        handler.setLevel(logging.WARNING)
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    return handler


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(config: BaseConfig) -> logging.Logger:
    """Send the ``taskflow`` logger to the console and ``DATA_DIR/logs/taskflow.log``.

    Handlers installed by an earlier call are closed and replaced, so an app
    factory may call this once per application.

    Args:
        config: Application configuration with DATA_DIR, DEV_MODE and STORAGE_BACKEND

    Returns:
        The configured ``taskflow`` logger
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.INFO)

    log_file = log_file_path(config)
    logger.addHandler(_console_handler(config.DEV_MODE))
    logger.addHandler(_file_handler(log_file))

    logger.info(
        "Logging initialized",
        extra={
            "dev_mode": config.DEV_MODE,
            "log_file": str(log_file),
            "storage": config.STORAGE_BACKEND,
        },
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``name`` under the ``taskflow`` namespace (module ``__name__`` works as-is)."""

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


__all__ = ["JSONFormatter", "RECORD_KEYS", "get_logger", "log_file_path", "setup_logging"]
