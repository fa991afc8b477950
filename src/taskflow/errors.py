"""Exception types raised by the TaskFlow core and its adapters."""

from __future__ import annotations

from typing import Any


class TaskflowError(Exception):
    """Base class for TaskFlow errors."""


class ValidationError(TaskflowError, ValueError):
    """A record field holds a value the core cannot interpret."""

    def __init__(self, field: str, value: Any, message: str | None = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid value for {field}: {value!r}")


class RecordNotFound(TaskflowError, LookupError):
    """No task or habit exists with the requested id."""

    def __init__(self, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(f"Record {record_id!r} not found")


__all__ = ["RecordNotFound", "TaskflowError", "ValidationError"]
