"""SQLModel implementation of the task repository."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Optional, TypeVar
from uuid import uuid4

from sqlmodel import Session, select

from ...domain.records import (
    Cadence,
    DailyStatusEntry,
    DateValue,
    Habit,
    HabitStatus,
    Priority,
    Record,
    Status,
    Subtask,
    Task,
)
from ...domain.repositories import check_subtask_ids
from ...errors import RecordNotFound, ValidationError
from ...logging_config import get_logger
from ...models.task import HabitCompletion, HabitDailyStatus, SubtaskRow, TaskRow
from ..database import SessionFactory

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)


def _to_text(value: Optional[DateValue]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _to_enum(enum_cls: type[E], value: str, field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValidationError(field, value) from exc


class SQLModelTaskRepository:
    """SQLModel-based task and habit repository."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_all(self) -> list[Record]:
        """Return every record, ordered by title."""
        with self.session_factory() as session:
            rows = session.exec(select(TaskRow).order_by(TaskRow.title)).all()  # type: ignore[arg-type]
            return [self._to_record(session, row) for row in rows]

    def get_by_id(self, record_id: str) -> Record:
        """Retrieve a record by ID."""
        with self.session_factory() as session:
            row = session.get(TaskRow, record_id)
            if row is None:
                raise RecordNotFound(record_id)
            return self._to_record(session, row)

    def add(self, record: Record) -> Record:
        """Insert a new record, generating an ID when missing."""
        if not record.id:
            record = replace(record, id=uuid4().hex)
        check_subtask_ids(record)
        with self.session_factory() as session:
            if session.get(TaskRow, record.id) is not None:
                raise ValidationError("id", record.id, f"Record {record.id!r} already exists")
            row = TaskRow(id=record.id, title=record.title)
            self._apply(row, record)
            session.add(row)
            self._write_children(session, record)
            session.commit()
        logger.info("Record added", extra={"record_id": record.id, "is_habit": record.is_habit})
        return record

    def update(self, record: Record) -> Record:
        """Replace an existing record and its child rows."""
        check_subtask_ids(record)
        with self.session_factory() as session:
            row = session.get(TaskRow, record.id)
            if row is None:
                raise RecordNotFound(record.id)
            self._apply(row, record)
            session.add(row)
            self._delete_children(session, record.id)
            session.flush()
            self._write_children(session, record)
            session.commit()
        logger.info("Record updated", extra={"record_id": record.id})
        return record

    def delete(self, record_id: str) -> None:
        """Delete a record and its child rows."""
        with self.session_factory() as session:
            row = session.get(TaskRow, record_id)
            if row is None:
                raise RecordNotFound(record_id)
            self._delete_children(session, record_id)
            session.delete(row)
            session.commit()
        logger.info("Record deleted", extra={"record_id": record_id})

    # Row mapping
    def _apply(self, row: TaskRow, record: Record) -> None:
        row.title = record.title
        row.description = record.description
        row.priority = Priority(record.priority).value
        row.tags = list(record.tags)
        row.is_habit = isinstance(record, Habit)
        if isinstance(record, Habit):
            row.status = Status.TODO.value
            row.start_date = None
            row.end_date = None
            row.notes = []
            row.cadence = Cadence(record.cadence).value
            row.streak_goal = record.streak_goal
            row.last_completed_date = _to_text(record.last_completed_date)
        else:
            row.status = Status(record.status).value
            row.start_date = _to_text(record.start_date)
            row.end_date = _to_text(record.end_date)
            row.notes = list(record.notes)
            row.cadence = None
            row.streak_goal = None
            row.last_completed_date = None

    def _write_children(self, session: Session, record: Record) -> None:
        if isinstance(record, Habit):
            for value in record.completion_history:
                session.add(HabitCompletion(habit_id=record.id, occurred_on=_to_text(value)))
            for entry in record.daily_status:
                session.add(
                    HabitDailyStatus(
                        habit_id=record.id,
                        day=_to_text(entry.day),
                        status=HabitStatus(entry.status).value,
                    )
                )
            return

        for position, subtask in enumerate(record.subtasks):
            session.add(
                SubtaskRow(
                    task_id=record.id,
                    subtask_id=subtask.id,
                    position=position,
                    title=subtask.title,
                    completed=subtask.completed,
                    start_date=_to_text(subtask.start_date),
                    end_date=_to_text(subtask.end_date),
                    tags=list(subtask.tags),
                )
            )

    def _delete_children(self, session: Session, record_id: str) -> None:
        for model, column in (
            (SubtaskRow, SubtaskRow.task_id),
            (HabitCompletion, HabitCompletion.habit_id),
            (HabitDailyStatus, HabitDailyStatus.habit_id),
        ):
            for child in session.exec(select(model).where(column == record_id)).all():
                session.delete(child)

    def _to_record(self, session: Session, row: TaskRow) -> Record:
        priority = _to_enum(Priority, row.priority, "priority")
        if row.is_habit:
            completions = session.exec(
                select(HabitCompletion)
                .where(HabitCompletion.habit_id == row.id)
                .order_by(HabitCompletion.id)  # type: ignore[arg-type]
            ).all()
            statuses = session.exec(
                select(HabitDailyStatus)
                .where(HabitDailyStatus.habit_id == row.id)
                .order_by(HabitDailyStatus.id)  # type: ignore[arg-type]
            ).all()
            return Habit(
                id=row.id,
                title=row.title,
                description=row.description,
                priority=priority,
                tags=tuple(row.tags or ()),
                cadence=_to_enum(Cadence, row.cadence or Cadence.DAILY.value, "cadence"),
                completion_history=tuple(c.occurred_on for c in completions),
                streak_goal=row.streak_goal,
                daily_status=tuple(
                    DailyStatusEntry(
                        day=s.day, status=_to_enum(HabitStatus, s.status, "daily_status")
                    )
                    for s in statuses
                ),
                last_completed_date=row.last_completed_date,
            )

        subtasks = session.exec(
            select(SubtaskRow)
            .where(SubtaskRow.task_id == row.id)
            .order_by(SubtaskRow.position)  # type: ignore[arg-type]
        ).all()
        return Task(
            id=row.id,
            title=row.title,
            description=row.description,
            priority=priority,
            status=_to_enum(Status, row.status, "status"),
            start_date=row.start_date,
            end_date=row.end_date,
            tags=tuple(row.tags or ()),
            subtasks=tuple(
                Subtask(
                    id=s.subtask_id,
                    title=s.title,
                    completed=s.completed,
                    start_date=s.start_date,
                    end_date=s.end_date,
                    tags=tuple(s.tags or ()),
                )
                for s in subtasks
            ),
            notes=tuple(row.notes or ()),
        )
