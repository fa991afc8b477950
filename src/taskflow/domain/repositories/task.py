"""Task repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...errors import ValidationError
from ..records import Record, Task


class TaskRepository(Protocol):
    """Storage for tasks and habits.

    Implementations return immutable snapshots; callers refresh them before
    each computation. Subtask ids are scoped to their parent task: two tasks
    may reuse one, a single task may not.
    """

    def list_all(self) -> list[Record]:
        """List every task and habit."""
        ...

    def get_by_id(self, record_id: str) -> Record:
        """Retrieve a record by ID, raising RecordNotFound if absent."""
        ...

    def add(self, record: Record) -> Record:
        """Store a new record, assigning an ID when it has none."""
        ...

    def update(self, record: Record) -> Record:
        """Replace an existing record."""
        ...

    def delete(self, record_id: str) -> None:
        """Delete a record by ID."""
        ...


def check_subtask_ids(record: Record) -> None:
    """Raise ValidationError if ``record`` repeats a subtask id."""

    if not isinstance(record, Task):
        return
    seen: set[str] = set()
    for subtask in record.subtasks:
        if subtask.id in seen:
            raise ValidationError(
                "subtasks", subtask.id, f"Subtask id {subtask.id!r} is repeated in {record.id!r}"
            )
        seen.add(subtask.id)
