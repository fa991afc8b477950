"""Repository protocol definitions for domain layer."""

from .task import TaskRepository, check_subtask_ids

__all__ = ["TaskRepository", "check_subtask_ids"]
