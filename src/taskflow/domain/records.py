"""Plain task, habit and calendar event records.

Records are immutable snapshots handed to the core by a repository. Date
fields hold either ``date``/``datetime`` objects or the ISO-8601 strings the
storage layer returns; the services parse them on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

DateValue = Union[str, date, datetime]


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Status(str, Enum):
    """Workflow state of a task."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class Cadence(str, Enum):
    """Recurrence granularity of a habit."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class HabitStatus(str, Enum):
    """Qualitative per-day annotation recorded against a habit."""

    CHANGES_OBSERVED = "changes observed"
    NO_CHANGES = "no changes"
    NEGATIVE = "negative"
    NOT_RECORDED = "not recorded"


@dataclass(frozen=True, slots=True)
class Subtask:
    """A checklist item belonging to a task, optionally scheduled on its own."""

    id: str
    title: str
    completed: bool = False
    start_date: Optional[DateValue] = None
    end_date: Optional[DateValue] = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Task:
    """A one-off piece of work with an optional scheduling window."""

    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    status: Status = Status.TODO
    start_date: Optional[DateValue] = None
    end_date: Optional[DateValue] = None
    tags: tuple[str, ...] = ()
    subtasks: tuple[Subtask, ...] = ()
    notes: tuple[str, ...] = ()

    @property
    def is_habit(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class DailyStatusEntry:
    """One day's qualitative status for a habit."""

    day: DateValue
    status: HabitStatus


@dataclass(frozen=True, slots=True)
class Habit:
    """A recurring habit tracked by completion days."""

    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    tags: tuple[str, ...] = ()
    cadence: Cadence = Cadence.DAILY
    completion_history: tuple[DateValue, ...] = ()
    streak_goal: Optional[int] = None
    daily_status: tuple[DailyStatusEntry, ...] = ()
    last_completed_date: Optional[DateValue] = None

    @property
    def is_habit(self) -> bool:
        return True


Record = Union[Task, Habit]


@dataclass(frozen=True, slots=True)
class TaskEvent:
    """A top-level task whose window covers the requested day."""

    id: str
    title: str
    priority: Priority
    start_date: Optional[DateValue]
    task: Task = field(repr=False)
    kind: str = "task"


@dataclass(frozen=True, slots=True)
class SubtaskEvent:
    """A subtask whose own window covers the requested day."""

    id: str
    parent_id: str
    title: str
    priority: Priority
    start_date: Optional[DateValue]
    subtask: Subtask = field(repr=False)
    kind: str = "subtask"


@dataclass(frozen=True, slots=True)
class HabitOccurrence:
    """A habit materialized on a specific calendar day."""

    id: str
    title: str
    priority: Priority
    day: date
    daily_status: HabitStatus
    habit: Habit = field(repr=False)
    start_date: None = None
    kind: str = "habit"


CalendarEvent = Union[TaskEvent, SubtaskEvent, HabitOccurrence]


__all__ = [
    "CalendarEvent",
    "Cadence",
    "DailyStatusEntry",
    "DateValue",
    "Habit",
    "HabitOccurrence",
    "HabitStatus",
    "Priority",
    "Record",
    "Status",
    "Subtask",
    "SubtaskEvent",
    "Task",
    "TaskEvent",
]
