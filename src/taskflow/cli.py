"""Flask CLI commands for TaskFlow."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import click

from .domain.records import (
    Cadence,
    DailyStatusEntry,
    Habit,
    HabitOccurrence,
    HabitStatus,
    Priority,
    Record,
    Status,
    Subtask,
    SubtaskEvent,
    Task,
)


def demo_records(today: date) -> list[Record]:
    """Return a small set of tasks and habits scheduled around ``today``."""

    def at(offset: int, hour: int = 9) -> str:
        day = today + timedelta(days=offset)
        return datetime(day.year, day.month, day.day, hour).isoformat()

    return [
        Task(
            id="demo-report",
            title="Quarterly report",
            priority=Priority.HIGH,
            status=Status.IN_PROGRESS,
            start_date=at(-1),
            end_date=at(2, 17),
            tags=("work",),
            subtasks=(
                Subtask(id="demo-report-draft", title="Draft", completed=True, start_date=at(-1)),
                Subtask(id="demo-report-review", title="Review", start_date=at(0, 14)),
            ),
        ),
        Task(
            id="demo-dentist",
            title="Dentist",
            priority=Priority.MEDIUM,
            start_date=at(0, 11),
            tags=("health",),
        ),
        Habit(
            id="demo-walk",
            title="Morning walk",
            priority=Priority.HIGH,
            cadence=Cadence.DAILY,
            streak_goal=30,
            completion_history=tuple(at(-offset, 7) for offset in range(1, 6)),
            daily_status=(
                DailyStatusEntry(day=(today - timedelta(days=1)).isoformat(),
                                 status=HabitStatus.CHANGES_OBSERVED),
            ),
            tags=("health",),
        ),
        Habit(
            id="demo-review",
            title="Weekly review",
            cadence=Cadence.WEEKLY,
            completion_history=tuple(at(-7 * weeks) for weeks in range(0, 3)),
        ),
    ]


def _parse_day(ctx, param, value: str | None) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter("use YYYY-MM-DD") from exc


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    from .extensions import get_repository

    @app.cli.command("taskflow-seed")
    @click.option("--today", callback=_parse_day, help="Anchor day for demo data (YYYY-MM-DD)")
    def taskflow_seed(today: date) -> None:
        """Load demo tasks and habits."""

        repo = get_repository()
        existing = {record.id for record in repo.list_all()}
        added = 0
        for record in demo_records(today):
            if record.id in existing:
                continue
            repo.add(record)
            added += 1
        click.echo(f"Seeded {added} record(s).")

    @app.cli.command("taskflow-agenda")
    @click.option("--day", callback=_parse_day, help="Day to show (YYYY-MM-DD)")
    def taskflow_agenda(day: date) -> None:
        """Print the events scheduled on a day."""

        from .services.schedule import day_summary

        summary = day_summary(get_repository().list_all(), day)
        click.echo(f"{day:%A %d %B %Y}")
        for event in summary.events:
            if isinstance(event, HabitOccurrence):
                label = f"habit, {event.daily_status.value}"
            elif isinstance(event, SubtaskEvent):
                label = f"subtask of {event.parent_id}"
            else:
                label = "task"
            click.echo(f"  [{event.priority.value:<6}] {event.title} ({label})")
        click.echo(
            f"Tasks {summary.tasks_completed}/{summary.tasks_total} · "
            f"Habits {summary.habits_completed}/{summary.habits_total}"
        )

    @app.cli.command("taskflow-streaks")
    @click.option("--today", callback=_parse_day, help="Reference day (YYYY-MM-DD)")
    def taskflow_streaks(today: date) -> None:
        """Print current and longest streak for every habit."""

        from .services.habits import compute_streaks, rank_habits

        habits = [r for r in get_repository().list_all() if isinstance(r, Habit)]
        if not habits:
            click.echo("No habits tracked.")
            return
        for habit in rank_habits(habits, today=today):
            current, longest = compute_streaks(habit, today=today)
            goal = f" / goal {habit.streak_goal}" if habit.streak_goal else ""
            click.echo(
                f"{habit.title}: {current} {habit.cadence.value} (best {longest}){goal}"
            )
