"""JSON-ready dictionaries for records, events and calendar summaries."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ...domain.records import (
    CalendarEvent,
    DateValue,
    Habit,
    HabitOccurrence,
    Record,
    SubtaskEvent,
    Task,
)
from ...services.habits import calculate_streak, longest_streak, status_summary, streak_progress
from ...services.schedule import DaySummary


def _text(value: Optional[DateValue]) -> Optional[str]:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def record_to_dict(record: Record) -> dict[str, Any]:
    """Serialize a task or habit as stored."""

    data: dict[str, Any] = {
        "id": record.id,
        "title": record.title,
        "description": record.description,
        "priority": record.priority.value,
        "tags": list(record.tags),
        "is_habit": record.is_habit,
    }
    if isinstance(record, Habit):
        data.update(_habit_fields(record))
    else:
        data.update(_task_fields(record))
    return data


def _habit_fields(habit: Habit) -> dict[str, Any]:
    return {
        "cadence": habit.cadence.value,
        "streak_goal": habit.streak_goal,
        "completion_history": [_text(v) for v in habit.completion_history],
        "daily_status": [
            {"date": _text(entry.day), "status": entry.status.value}
            for entry in habit.daily_status
        ],
        "last_completed_date": _text(habit.last_completed_date),
    }


def _task_fields(task: Task) -> dict[str, Any]:
    return {
        "status": task.status.value,
        "start_date": _text(task.start_date),
        "end_date": _text(task.end_date),
        "notes": list(task.notes),
        "subtasks": [
            {
                "id": subtask.id,
                "title": subtask.title,
                "completed": subtask.completed,
                "start_date": _text(subtask.start_date),
                "end_date": _text(subtask.end_date),
                "tags": list(subtask.tags),
            }
            for subtask in task.subtasks
        ],
    }


def habit_overview(habit: Habit, today: date) -> dict[str, Any]:
    """Serialize a habit with its streak figures as of ``today``."""

    data = record_to_dict(habit)
    data.update(
        current_streak=calculate_streak(habit, today=today),
        longest_streak=longest_streak(habit),
        progress=streak_progress(habit, today=today),
        status_summary={
            status.value: count
            for status, count in status_summary(habit, today=today).items()
        },
    )
    return data


def event_to_dict(event: CalendarEvent) -> dict[str, Any]:
    data: dict[str, Any] = {
        "kind": event.kind,
        "id": event.id,
        "title": event.title,
        "priority": event.priority.value,
        "start_date": _text(event.start_date),
    }
    if isinstance(event, SubtaskEvent):
        data["parent_id"] = event.parent_id
    elif isinstance(event, HabitOccurrence):
        data["daily_status"] = event.daily_status.value
    return data


def summary_to_dict(summary: DaySummary, *, include_events: bool = True) -> dict[str, Any]:
    data: dict[str, Any] = {
        "date": summary.day.isoformat(),
        "tasks": {"completed": summary.tasks_completed, "total": summary.tasks_total},
        "habits": {"completed": summary.habits_completed, "total": summary.habits_total},
    }
    if include_events:
        data["events"] = [event_to_dict(event) for event in summary.events]
    return data
