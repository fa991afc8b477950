"""Habit streak calculations and pure habit updates."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, Optional

from ..domain.records import DailyStatusEntry, DateValue, Habit, HabitStatus, Priority
from ..errors import ValidationError
from .cadence import rules_for, to_calendar_day


def _reference_day(today: Optional[DateValue]) -> date:
    # A reference instant counts as its calendar day.
    if today is None:
        return date.today()
    return to_calendar_day(today, field="today")


def completion_days(habit: Habit) -> set[date]:
    """Return the distinct calendar days on which ``habit`` was completed."""

    return {
        to_calendar_day(value, field="completion_history")
        for value in habit.completion_history
    }


def calculate_streak(habit: Habit, *, today: Optional[DateValue] = None) -> int:
    """Return the number of consecutive cadence periods completed.

    The chain must reach the current or immediately prior period relative to
    ``today``; otherwise the streak is broken and 0 is returned. Several
    completions inside one period count once. Completions dated after
    ``today`` are ignored.
    """

    if not habit.completion_history:
        return 0

    today = _reference_day(today)
    rules = rules_for(habit.cadence)
    days = sorted((d for d in completion_days(habit) if d <= today), reverse=True)
    if not days or not rules.is_current(days[0], today):
        return 0

    streak = 1
    cursor = days[0]
    expected = rules.step_back(cursor, 1)
    for day in days[1:]:
        if rules.periods_between(expected, day) > 0:
            break
        if rules.periods_between(cursor, day) >= 1:
            streak += 1
            cursor = day
            expected = rules.step_back(cursor, 1)
    return streak


def longest_streak(habit: Habit) -> int:
    """Return the longest run of consecutive cadence periods in the history."""

    rules = rules_for(habit.cadence)
    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(completion_days(habit)):
        if previous is None:
            run = 1
        else:
            gap = rules.periods_between(day, previous)
            if gap == 0:
                continue
            run = run + 1 if gap == 1 else 1
        longest = max(longest, run)
        previous = day
    return longest


def compute_streaks(habit: Habit, *, today: Optional[DateValue] = None) -> tuple[int, int]:
    """Return (current_streak, longest_streak) for ``habit``."""

    return calculate_streak(habit, today=today), longest_streak(habit)


def streak_progress(habit: Habit, *, today: Optional[DateValue] = None) -> float | None:
    """Percent of the streak goal reached, capped at 100; None without a goal."""

    if not habit.streak_goal:
        return None
    streak = calculate_streak(habit, today=today)
    return min(100.0, streak / habit.streak_goal * 100)


def is_completed_on(habit: Habit, day: DateValue) -> bool:
    """Return True if ``habit`` has a completion on ``day``'s calendar day."""

    return to_calendar_day(day) in completion_days(habit)


def toggle_completion(habit: Habit, day: DateValue) -> Habit:
    """Return a copy of ``habit`` with ``day`` marked complete, or un-marked if it was."""

    target = to_calendar_day(day)
    history = list(habit.completion_history)
    kept = [
        value
        for value in history
        if to_calendar_day(value, field="completion_history") != target
    ]
    if len(kept) == len(history):
        kept.append(target.isoformat())

    remaining = [to_calendar_day(value) for value in kept]
    last_completed = max(remaining).isoformat() if remaining else None
    return replace(habit, completion_history=tuple(kept), last_completed_date=last_completed)


def _coerce_status(status: HabitStatus | str) -> HabitStatus:
    try:
        return HabitStatus(status)
    except ValueError as exc:
        raise ValidationError("daily_status", status, f"Unknown habit status: {status!r}") from exc


def daily_status_for(habit: Habit, day: DateValue) -> HabitStatus:
    """Return the status recorded for ``day``, or ``not recorded``."""

    target = to_calendar_day(day)
    for entry in habit.daily_status:
        if to_calendar_day(entry.day, field="daily_status") == target:
            return _coerce_status(entry.status)
    return HabitStatus.NOT_RECORDED


def set_daily_status(habit: Habit, day: DateValue, status: HabitStatus | str) -> Habit:
    """Return a copy of ``habit`` with ``day``'s status replaced.

    Setting ``not recorded`` removes the day's entry.
    """

    target = to_calendar_day(day)
    new_status = _coerce_status(status)
    entries = [
        entry
        for entry in habit.daily_status
        if to_calendar_day(entry.day, field="daily_status") != target
    ]
    if new_status is not HabitStatus.NOT_RECORDED:
        entries.append(DailyStatusEntry(day=target.isoformat(), status=new_status))
    return replace(habit, daily_status=tuple(entries))


def status_summary(
    habit: Habit, *, today: Optional[DateValue] = None, window_days: int = 30
) -> dict[HabitStatus, int]:
    """Count recorded statuses over the trailing ``window_days`` ending today."""

    today = _reference_day(today)
    window_start = today - timedelta(days=window_days - 1)
    counts = {
        status: 0 for status in HabitStatus if status is not HabitStatus.NOT_RECORDED
    }
    for entry in habit.daily_status:
        day = to_calendar_day(entry.day, field="daily_status")
        status = _coerce_status(entry.status)
        if window_start <= day <= today and status in counts:
            counts[status] += 1
    return counts


def rank_habits(habits: Iterable[Habit], *, today: Optional[DateValue] = None) -> list[Habit]:
    """Order habits high priority first, then by current streak, longest first."""

    today = _reference_day(today)
    return sorted(
        habits,
        key=lambda habit: (
            habit.priority != Priority.HIGH,
            -calculate_streak(habit, today=today),
        ),
    )


__all__ = [
    "calculate_streak",
    "completion_days",
    "compute_streaks",
    "daily_status_for",
    "is_completed_on",
    "longest_streak",
    "rank_habits",
    "set_daily_status",
    "status_summary",
    "streak_progress",
    "toggle_completion",
]
