"""Calendar aggregation of tasks, subtasks and habit occurrences."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable, Optional, Sequence

from ..domain.records import (
    CalendarEvent,
    DateValue,
    Habit,
    HabitOccurrence,
    Record,
    Status,
    SubtaskEvent,
    Task,
    TaskEvent,
)
from .cadence import (
    end_of_month,
    end_of_week,
    start_of_month,
    start_of_week,
    to_calendar_day,
    to_instant,
)
from .habits import daily_status_for, is_completed_on


@dataclass(frozen=True, slots=True)
class HabitStats:
    """Habit completion totals for one day."""

    total: int
    completed: int


@dataclass(frozen=True, slots=True)
class DaySummary:
    """Everything a calendar cell shows for one day."""

    day: date
    events: tuple[CalendarEvent, ...]
    tasks_completed: int
    tasks_total: int
    habits_completed: int
    habits_total: int


def _as_records(records: Any) -> list[Record]:
    # Callers may hand over whatever a loading state left behind.
    if isinstance(records, (list, tuple)):
        return list(records)
    return []


def _covers(start: DateValue, end: Optional[DateValue], day: date, field: str) -> bool:
    start_day = to_calendar_day(start, field=f"{field}.start_date")
    end_day = to_calendar_day(end, field=f"{field}.end_date") if end is not None else start_day
    return start_day <= day <= end_day


def _sort_key(event: CalendarEvent) -> float:
    if event.start_date is None:
        return 0.0
    return to_instant(event.start_date, field="start_date").timestamp()


def events_for_day(records: Any, day: DateValue) -> list[CalendarEvent]:
    """Return the deduplicated events that fall on ``day``, earliest start first.

    Every habit yields one occurrence regardless of cadence. Tasks and
    subtasks are emitted independently when their own calendar-day window
    covers ``day``. Events without a start (habit occurrences) sort first.
    """

    target = to_calendar_day(day, field="day")
    events: list[CalendarEvent] = []

    for record in _as_records(records):
        if isinstance(record, Habit):
            events.append(
                HabitOccurrence(
                    id=record.id,
                    title=record.title,
                    priority=record.priority,
                    day=target,
                    daily_status=daily_status_for(record, target),
                    habit=record,
                )
            )
            continue

        if record.start_date is not None and _covers(
            record.start_date, record.end_date, target, "task"
        ):
            events.append(
                TaskEvent(
                    id=record.id,
                    title=record.title,
                    priority=record.priority,
                    start_date=record.start_date,
                    task=record,
                )
            )

        for subtask in record.subtasks:
            if subtask.start_date is None:
                continue
            if _covers(subtask.start_date, subtask.end_date, target, "subtask"):
                events.append(
                    SubtaskEvent(
                        id=subtask.id,
                        parent_id=record.id,
                        title=subtask.title,
                        priority=record.priority,
                        start_date=subtask.start_date,
                        subtask=subtask,
                    )
                )

    events.sort(key=_sort_key)

    seen: set[str] = set()
    unique: list[CalendarEvent] = []
    for event in events:
        if event.id in seen:
            continue
        seen.add(event.id)
        unique.append(event)
    return unique


def _subtask_completed(event: SubtaskEvent, tasks: Optional[dict[str, Task]]) -> bool:
    if tasks is None:
        return event.subtask.completed
    parent = tasks.get(event.parent_id)
    if parent is None:
        return False
    for subtask in parent.subtasks:
        if subtask.id == event.id:
            return subtask.completed
    return False


def completed_count(
    events: Iterable[CalendarEvent], day: DateValue, records: Any = None
) -> int:
    """Count events that are complete on ``day``.

    Subtasks are resolved against ``records`` when given, so a subtask ticked
    off after the events were built still counts; otherwise the snapshot
    carried by the event is used.
    """

    target = to_calendar_day(day, field="day")
    tasks = None
    if records is not None:
        tasks = {r.id: r for r in _as_records(records) if isinstance(r, Task)}

    count = 0
    for event in events:
        if isinstance(event, SubtaskEvent):
            done = _subtask_completed(event, tasks)
        elif isinstance(event, HabitOccurrence):
            done = is_completed_on(event.habit, target)
        else:
            done = event.task.status == Status.DONE
        if done:
            count += 1
    return count


def habit_stats(records: Any, day: DateValue) -> HabitStats:
    """Return how many habits exist and how many were completed on ``day``."""

    target = to_calendar_day(day, field="day")
    habits = [r for r in _as_records(records) if isinstance(r, Habit)]
    completed = sum(1 for habit in habits if is_completed_on(habit, target))
    return HabitStats(total=len(habits), completed=completed)


def day_summary(records: Any, day: DateValue) -> DaySummary:
    """Build the event list and completion badges for one calendar day."""

    target = to_calendar_day(day, field="day")
    events = events_for_day(records, target)
    timed, _ = split_events(events)
    stats = habit_stats(records, target)
    return DaySummary(
        day=target,
        events=tuple(events),
        tasks_completed=completed_count(timed, target, records),
        tasks_total=len(timed),
        habits_completed=stats.completed,
        habits_total=stats.total,
    )


def month_grid(records: Any, anchor: DateValue) -> list[DaySummary]:
    """Summaries for the whole Monday-start weeks covering ``anchor``'s month."""

    anchor_day = to_calendar_day(anchor, field="anchor")
    cursor = start_of_week(start_of_month(anchor_day))
    last = end_of_week(end_of_month(anchor_day))
    grid: list[DaySummary] = []
    while cursor <= last:
        grid.append(day_summary(records, cursor))
        cursor += timedelta(days=1)
    return grid


def collect_tags(records: Any) -> list[str]:
    """Return the sorted set of tags used by tasks, subtasks and habits."""

    tags: set[str] = set()
    for record in _as_records(records):
        tags.update(record.tags)
        if isinstance(record, Task):
            for subtask in record.subtasks:
                tags.update(subtask.tags)
    return sorted(tags)


def split_events(
    events: Sequence[CalendarEvent],
) -> tuple[list[CalendarEvent], list[HabitOccurrence]]:
    """Partition events into (timed events, habit occurrences)."""

    timed: list[CalendarEvent] = []
    habits: list[HabitOccurrence] = []
    for event in events:
        if isinstance(event, HabitOccurrence):
            habits.append(event)
        else:
            timed.append(event)
    return timed, habits


__all__ = [
    "DaySummary",
    "HabitStats",
    "collect_tags",
    "completed_count",
    "day_summary",
    "events_for_day",
    "habit_stats",
    "month_grid",
    "split_events",
]
