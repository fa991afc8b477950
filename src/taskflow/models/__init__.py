"""SQLModel table exports."""

from .task import HabitCompletion, HabitDailyStatus, SubtaskRow, TaskRow

__all__ = [
    "HabitCompletion",
    "HabitDailyStatus",
    "SubtaskRow",
    "TaskRow",
]
