"""Pure habit and calendar services.

Nothing in this package performs I/O, logs, or mutates its inputs.
"""

from .habits import calculate_streak, compute_streaks, longest_streak
from .schedule import completed_count, events_for_day, habit_stats

__all__ = [
    "calculate_streak",
    "completed_count",
    "compute_streaks",
    "events_for_day",
    "habit_stats",
    "longest_streak",
]
