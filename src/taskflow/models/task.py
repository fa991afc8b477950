"""Task and habit storage tables.

Tasks and habits share ``task`` rows, told apart by ``is_habit``. Date columns
keep the text the client sent; the services parse it.
"""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


class TaskRow(SQLModel, table=True):
    """A task or habit."""

    __tablename__: ClassVar[str] = "task"

    id: str = Field(primary_key=True, max_length=64)
    title: str = Field(nullable=False, max_length=200, index=True)
    description: str = Field(default="", max_length=2000)
    priority: str = Field(default="medium", max_length=16)
    status: str = Field(default="todo", max_length=16)
    start_date: Optional[str] = Field(default=None, max_length=64)
    end_date: Optional[str] = Field(default=None, max_length=64)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    notes: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    is_habit: bool = Field(default=False, nullable=False, index=True)
    cadence: Optional[str] = Field(default=None, max_length=16)
    streak_goal: Optional[int] = Field(default=None)
    last_completed_date: Optional[str] = Field(default=None, max_length=64)


class SubtaskRow(SQLModel, table=True):
    """Checklist item of a task; ``subtask_id`` is unique only within its task."""

    __tablename__: ClassVar[str] = "subtask"
    __table_args__ = (UniqueConstraint("task_id", "subtask_id", name="uq_subtask_task_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: str = Field(foreign_key="task.id", nullable=False, index=True)
    subtask_id: str = Field(nullable=False, max_length=64)
    position: int = Field(default=0, nullable=False)
    title: str = Field(nullable=False, max_length=200)
    completed: bool = Field(default=False, nullable=False)
    start_date: Optional[str] = Field(default=None, max_length=64)
    end_date: Optional[str] = Field(default=None, max_length=64)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


class HabitCompletion(SQLModel, table=True):
    """One completion timestamp of a habit."""

    __tablename__: ClassVar[str] = "habit_completion"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: str = Field(foreign_key="task.id", nullable=False, index=True)
    occurred_on: str = Field(nullable=False, max_length=64)


class HabitDailyStatus(SQLModel, table=True):
    """Qualitative status recorded for a habit on one day."""

    __tablename__: ClassVar[str] = "habit_daily_status"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: str = Field(foreign_key="task.id", nullable=False, index=True)
    day: str = Field(nullable=False, max_length=64)
    status: str = Field(nullable=False, max_length=32)
