"""Payload models for the JSON API."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ...domain.records import (
    Cadence,
    Habit,
    HabitStatus,
    Priority,
    Record,
    Status,
    Subtask,
    Task,
)
from ...errors import ValidationError as RecordValidationError
from ...services.cadence import to_calendar_day


def _check_date(value: Optional[str], field: str) -> Optional[str]:
    if value is None or value == "":
        return None
    try:
        to_calendar_day(value, field=field)
    except RecordValidationError as exc:
        raise ValueError(f"{field} must be an ISO-8601 date") from exc
    return value


def _window(start: Optional[str], end: Optional[str]) -> tuple[date, date] | None:
    if start is None:
        return None
    start_day = to_calendar_day(start)
    return start_day, to_calendar_day(end) if end else start_day


def _split_tags(value: str | Iterable[str]) -> list[str] | Iterable[str]:
    if isinstance(value, str):
        return [tag for tag in (part.strip() for part in value.split(",")) if tag]
    return value


class _Form(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore", populate_by_name=True)

    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def split_tags(cls, value: str | Iterable[str]) -> list[str] | Iterable[str]:
        """Convert comma-separated tag strings into a list."""

        return _split_tags(value)


class SubtaskForm(_Form):
    """A subtask inside a task payload."""

    id: Optional[str] = None
    title: str = Field(min_length=1, max_length=200)
    completed: bool = False
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_window(self) -> "SubtaskForm":
        """Dates must parse and the end may not precede the start."""

        self.start_date = _check_date(self.start_date, "start_date")
        self.end_date = _check_date(self.end_date, "end_date")
        if self.end_date and not self.start_date:
            raise ValueError("end_date requires start_date")
        window = _window(self.start_date, self.end_date)
        if window and window[1] < window[0]:
            raise ValueError("end_date must not be before start_date")
        return self

    def to_record(self) -> Subtask:
        return Subtask(
            id=self.id or uuid4().hex,
            title=self.title,
            completed=self.completed,
            start_date=self.start_date,
            end_date=self.end_date,
            tags=tuple(self.tags),
        )


class TaskForm(_Form):
    """Create or replace a task."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    priority: Priority = Priority.MEDIUM
    status: Status = Status.TODO
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    subtasks: list[SubtaskForm] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_window(self) -> "TaskForm":
        """Validate the task window and keep subtask windows inside it."""

        self.start_date = _check_date(self.start_date, "start_date")
        self.end_date = _check_date(self.end_date, "end_date")
        if self.end_date and not self.start_date:
            raise ValueError("end_date requires start_date")
        window = _window(self.start_date, self.end_date)
        if window is None:
            return self
        if window[1] < window[0]:
            raise ValueError("end_date must not be before start_date")
        for subtask in self.subtasks:
            sub_window = _window(subtask.start_date, subtask.end_date)
            if sub_window and (sub_window[0] < window[0] or sub_window[1] > window[1]):
                raise ValueError(f"Subtask {subtask.title!r} must fall within the task's dates")
        return self

    def to_record(self, record_id: str = "") -> Task:
        return Task(
            id=record_id,
            title=self.title,
            description=self.description,
            priority=self.priority,
            status=self.status,
            start_date=self.start_date,
            end_date=self.end_date,
            tags=tuple(self.tags),
            subtasks=tuple(subtask.to_record() for subtask in self.subtasks),
            notes=tuple(self.notes),
        )


class HabitForm(_Form):
    """Create or edit a habit; history is kept from the existing record."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    priority: Priority = Priority.MEDIUM
    cadence: Cadence = Cadence.DAILY
    streak_goal: Optional[int] = Field(default=None, ge=1)
    tags: list[str] = Field(default_factory=list)

    def to_record(self, record_id: str = "", existing: Habit | None = None) -> Habit:
        return Habit(
            id=record_id,
            title=self.title,
            description=self.description,
            priority=self.priority,
            tags=tuple(self.tags),
            cadence=self.cadence,
            streak_goal=self.streak_goal,
            completion_history=existing.completion_history if existing else (),
            daily_status=existing.daily_status if existing else (),
            last_completed_date=existing.last_completed_date if existing else None,
        )


class DayForm(_Form):
    """A request naming a calendar day; defaults to today."""

    day_value: Optional[str] = Field(default=None, alias="date")

    @field_validator("day_value")
    @classmethod
    def validate_date(cls, value: Optional[str]) -> Optional[str]:
        return _check_date(value, "date")

    def day(self) -> date:
        return to_calendar_day(self.day_value) if self.day_value else date.today()


class DailyStatusForm(DayForm):
    """Set the qualitative status for one day."""

    status: HabitStatus


def parse_record(payload: dict, record_id: str = "", existing: Record | None = None) -> Record:
    """Validate ``payload`` as a habit or task depending on its ``is_habit`` flag."""

    if payload.get("is_habit", isinstance(existing, Habit)):
        habit = existing if isinstance(existing, Habit) else None
        return HabitForm.model_validate(payload).to_record(record_id, habit)
    return TaskForm.model_validate(payload).to_record(record_id)


def form_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Flatten pydantic errors into ``{field: [messages]}``."""

    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = ".".join(str(part) for part in loc) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


__all__ = [
    "DailyStatusForm",
    "DayForm",
    "HabitForm",
    "SubtaskForm",
    "TaskForm",
    "form_errors",
    "parse_record",
]
