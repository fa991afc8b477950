"""Tests for habit streak calculations.

Covers daily, weekly and monthly cadences, including:
- Consecutive periods and gaps
- Several completions inside one period
- Streaks that end yesterday / last week / last month
- Out-of-order, future-dated and malformed history entries
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from taskflow.domain.records import Cadence
from taskflow.errors import ValidationError
from taskflow.services.habits import (
    calculate_streak,
    compute_streaks,
    longest_streak,
    streak_progress,
)


def days_ago(today: date, *offsets: int) -> tuple[str, ...]:
    return tuple((today - timedelta(days=n)).isoformat() for n in offsets)


class TestDailyStreak:
    """Daily cadence current streak."""

    def test_no_entries_returns_zero_streak(self, habit_factory, today):
        assert calculate_streak(habit_factory(), today=today) == 0

    def test_single_entry_today_returns_one(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 0))
        assert calculate_streak(habit, today=today) == 1

    def test_streak_ending_yesterday_is_still_active(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 1, 2))
        assert calculate_streak(habit, today=today) == 2

    def test_latest_completion_before_yesterday_breaks_streak(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 2, 3, 4, 5))
        assert calculate_streak(habit, today=today) == 0

    def test_three_consecutive_days(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 0, 1, 2))
        assert calculate_streak(habit, today=today) == 3

    def test_two_timestamps_on_one_day_count_once(self, habit_factory, today):
        yesterday = today - timedelta(days=1)
        habit = habit_factory(
            completion_history=(
                f"{today.isoformat()}T07:00:00Z",
                f"{today.isoformat()}T21:30:00Z",
                f"{yesterday.isoformat()}T08:00:00Z",
            )
        )
        assert calculate_streak(habit, today=today) == 2

    def test_adding_a_same_day_completion_never_changes_streak(self, habit_factory, today):
        base = days_ago(today, 0, 1, 3)
        habit = habit_factory(completion_history=base)
        doubled = habit_factory(
            completion_history=base + (f"{(today - timedelta(days=1)).isoformat()}T23:59:00",)
        )
        assert calculate_streak(doubled, today=today) == calculate_streak(habit, today=today) == 2

    def test_gap_stops_the_chain(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 0, 1, 3, 4, 5))
        assert calculate_streak(habit, today=today) == 2

    def test_history_order_is_irrelevant(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 2, 0, 1))
        assert calculate_streak(habit, today=today) == 3

    def test_future_dated_entries_are_ignored(self, habit_factory, today):
        future = (today + timedelta(days=3)).isoformat()
        habit = habit_factory(completion_history=(future,) + days_ago(today, 0, 1))
        assert calculate_streak(habit, today=today) == 2

    def test_date_objects_are_accepted(self, habit_factory, today):
        habit = habit_factory(completion_history=(today, today - timedelta(days=1)))
        assert calculate_streak(habit, today=today) == 2

    def test_calling_twice_gives_same_result(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 0, 1, 2, 4))
        assert calculate_streak(habit, today=today) == calculate_streak(habit, today=today)

    def test_today_defaults_to_the_current_date(self, habit_factory):
        habit = habit_factory(completion_history=(date.today().isoformat(),))
        assert calculate_streak(habit) == 1

    def test_datetime_today_is_reduced_to_its_day(self, habit_factory):
        habit = habit_factory(completion_history=("2024-08-01",))

        assert calculate_streak(habit, today=datetime(2024, 8, 1, 12)) == 1
        assert calculate_streak(habit, today=datetime(2024, 8, 2, 23, 59)) == 1
        assert compute_streaks(habit, today="2024-08-03T08:00:00Z") == (0, 1)

    def test_malformed_entry_raises_validation_error(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 0) + ("not-a-date",))
        with pytest.raises(ValidationError) as excinfo:
            calculate_streak(habit, today=today)
        assert excinfo.value.field == "completion_history"


class TestWeeklyStreak:
    """Weekly cadence; weeks start on Monday. Today is Wednesday 2024-08-14."""

    def test_three_consecutive_iso_weeks(self, habit_factory, today):
        habit = habit_factory(
            cadence=Cadence.WEEKLY,
            completion_history=("2024-08-14", "2024-08-07", "2024-07-29"),
        )
        assert calculate_streak(habit, today=today) == 3

    def test_skipped_week_breaks_chain(self, habit_factory, today):
        habit = habit_factory(
            cadence=Cadence.WEEKLY,
            completion_history=("2024-08-13", "2024-07-31", "2024-07-24"),
        )
        assert calculate_streak(habit, today=today) == 1

    def test_several_completions_in_one_week_count_once(self, habit_factory, today):
        habit = habit_factory(
            cadence=Cadence.WEEKLY,
            completion_history=("2024-08-12", "2024-08-13", "2024-08-14", "2024-08-09"),
        )
        assert calculate_streak(habit, today=today) == 2

    def test_sunday_and_following_monday_are_consecutive_weeks(self, habit_factory, today):
        habit = habit_factory(
            cadence=Cadence.WEEKLY,
            completion_history=("2024-08-12", "2024-08-11"),
        )
        assert calculate_streak(habit, today=today) == 2

    def test_streak_ending_last_week_is_still_active(self, habit_factory, today):
        habit = habit_factory(
            cadence=Cadence.WEEKLY,
            completion_history=("2024-08-05", "2024-07-30"),
        )
        assert calculate_streak(habit, today=today) == 2

    def test_latest_completion_two_weeks_back_breaks_streak(self, habit_factory, today):
        habit = habit_factory(cadence=Cadence.WEEKLY, completion_history=("2024-08-04",))
        assert calculate_streak(habit, today=today) == 0


class TestMonthlyStreak:
    """Monthly cadence on calendar months."""

    def test_three_consecutive_months(self, habit_factory, today):
        habit = habit_factory(
            cadence=Cadence.MONTHLY,
            completion_history=("2024-08-03", "2024-07-20", "2024-06-01"),
        )
        assert calculate_streak(habit, today=today) == 3

    def test_skipped_month_breaks_chain(self, habit_factory, today):
        habit = habit_factory(
            cadence=Cadence.MONTHLY,
            completion_history=("2024-08-03", "2024-06-01"),
        )
        assert calculate_streak(habit, today=today) == 1

    def test_month_end_completions_chain_across_short_months(self, habit_factory):
        habit = habit_factory(
            cadence=Cadence.MONTHLY,
            completion_history=("2024-03-31", "2024-02-29", "2024-01-31"),
        )
        assert calculate_streak(habit, today=date(2024, 3, 31)) == 3

    def test_latest_completion_before_last_month_breaks_streak(self, habit_factory, today):
        habit = habit_factory(cadence=Cadence.MONTHLY, completion_history=("2024-06-30",))
        assert calculate_streak(habit, today=today) == 0


class TestLongestStreak:
    def test_no_entries_returns_zero(self, habit_factory):
        assert longest_streak(habit_factory()) == 0

    def test_longest_run_found_anywhere_in_history(self, habit_factory):
        habit = habit_factory(
            completion_history=(
                "2024-07-01", "2024-07-02", "2024-07-03", "2024-07-04",
                "2024-07-10", "2024-07-11",
            )
        )
        assert longest_streak(habit) == 4

    def test_same_period_duplicates_do_not_inflate(self, habit_factory):
        habit = habit_factory(
            cadence=Cadence.WEEKLY,
            completion_history=("2024-07-01", "2024-07-02", "2024-07-09", "2024-07-30"),
        )
        assert longest_streak(habit) == 2

    def test_compute_streaks_returns_current_and_longest(self, habit_factory, today):
        habit = habit_factory(
            completion_history=days_ago(today, 0, 1) + days_ago(today, 10, 11, 12)
        )
        assert compute_streaks(habit, today=today) == (2, 3)


class TestStreakProgress:
    def test_progress_is_percentage_of_goal(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 0, 1, 2), streak_goal=10)
        assert streak_progress(habit, today=today) == pytest.approx(30.0)

    def test_progress_is_capped_at_one_hundred(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 0, 1, 2), streak_goal=2)
        assert streak_progress(habit, today=today) == 100.0

    def test_no_goal_returns_none(self, habit_factory, today):
        habit = habit_factory(completion_history=days_ago(today, 0))
        assert streak_progress(habit, today=today) is None
