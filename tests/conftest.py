"""Pytest configuration and shared fixtures for TaskFlow tests.

Provides a fixed reference day, record factories, repositories backed by an
in-memory dict or a throwaway SQLite file, and a Flask test client.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from taskflow.app import create_app
from taskflow.config import TestConfig
from taskflow.domain.records import Cadence, Habit, Priority, Status, Subtask, Task
from taskflow.infra.database import create_session_factory
from taskflow.infra.repositories import InMemoryTaskRepository, SQLModelTaskRepository

# Wednesday; the ISO week runs Monday 2024-08-12 to Sunday 2024-08-18.
REFERENCE_DAY = date(2024, 8, 14)


@pytest.fixture
def today() -> date:
    """Fixed evaluation day so streak windows are deterministic."""
    return REFERENCE_DAY


# =============================================================================
# Record Factories
# =============================================================================


@pytest.fixture
def habit_factory():
    """Factory for habits with sensible defaults."""

    counter = {"n": 0}

    def _create_habit(
        *,
        id: str | None = None,
        title: str = "Read",
        cadence: Cadence = Cadence.DAILY,
        completion_history: tuple = (),
        priority: Priority = Priority.MEDIUM,
        **kwargs,
    ) -> Habit:
        counter["n"] += 1
        return Habit(
            id=id or f"habit-{counter['n']}",
            title=title,
            cadence=cadence,
            completion_history=tuple(completion_history),
            priority=priority,
            **kwargs,
        )

    return _create_habit


@pytest.fixture
def task_factory():
    """Factory for tasks with sensible defaults."""

    counter = {"n": 0}

    def _create_task(
        *,
        id: str | None = None,
        title: str = "Write report",
        start_date=None,
        end_date=None,
        status: Status = Status.TODO,
        priority: Priority = Priority.MEDIUM,
        subtasks: tuple[Subtask, ...] = (),
        **kwargs,
    ) -> Task:
        counter["n"] += 1
        return Task(
            id=id or f"task-{counter['n']}",
            title=title,
            start_date=start_date,
            end_date=end_date,
            status=status,
            priority=priority,
            subtasks=tuple(subtasks),
            **kwargs,
        )

    return _create_task


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the application builds."""
    return create_session_factory(db_engine)


@pytest.fixture(params=["memory", "sqlmodel"])
def repository(request, session_factory):
    """Each repository implementation in turn."""
    if request.param == "memory":
        return InMemoryTaskRepository()
    return SQLModelTaskRepository(session_factory)


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def test_config(tmp_path, monkeypatch) -> TestConfig:
    monkeypatch.setenv("TASKFLOW_DATA_DIR", str(tmp_path))
    return TestConfig()


@pytest.fixture
def app(test_config):
    app = create_app(config=test_config, repository=InMemoryTaskRepository())
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
