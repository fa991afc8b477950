"""Dict-backed repository for tests, demos and the ``memory`` storage backend."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable
from uuid import uuid4

from ...domain.records import Record
from ...domain.repositories import check_subtask_ids
from ...errors import RecordNotFound, ValidationError
from ...logging_config import get_logger

logger = get_logger(__name__)


class InMemoryTaskRepository:
    """Keeps records in insertion order in a plain dict."""

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: dict[str, Record] = {}
        for record in records:
            self.add(record)

    def list_all(self) -> list[Record]:
        return list(self._records.values())

    def get_by_id(self, record_id: str) -> Record:
        try:
            return self._records[record_id]
        except KeyError:
            raise RecordNotFound(record_id) from None

    def add(self, record: Record) -> Record:
        if not record.id:
            record = replace(record, id=uuid4().hex)
        check_subtask_ids(record)
        if record.id in self._records:
            raise ValidationError("id", record.id, f"Record {record.id!r} already exists")
        self._records[record.id] = record
        logger.debug("Added record", extra={"record_id": record.id})
        return record

    def update(self, record: Record) -> Record:
        check_subtask_ids(record)
        if record.id not in self._records:
            raise RecordNotFound(record.id)
        self._records[record.id] = record
        logger.debug("Updated record", extra={"record_id": record.id})
        return record

    def delete(self, record_id: str) -> None:
        if self._records.pop(record_id, None) is None:
            raise RecordNotFound(record_id)
        logger.debug("Deleted record", extra={"record_id": record_id})
