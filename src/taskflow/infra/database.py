"""Engine, schema and sessions for the ``sqlite`` storage backend."""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from functools import partial
from typing import Callable, Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]


def create_db_engine(config: BaseConfig) -> Engine:
    return create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())


def init_database(engine: Engine) -> list[str]:
    """Create any missing task tables and return the names present afterwards."""
    from ..models import HabitCompletion, HabitDailyStatus, SubtaskRow, TaskRow

    tables = [model.__table__ for model in (TaskRow, SubtaskRow, HabitCompletion, HabitDailyStatus)]
    SQLModel.metadata.create_all(engine, tables=tables)
    return [table.name for table in tables]


@contextmanager
def _transaction(engine: Engine) -> Iterator[Session]:
    # Records leave the session as snapshots, so keep attributes loaded.
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_session_factory(engine: Engine) -> SessionFactory:
    """Return a callable opening one committed-or-rolled-back session per use."""
    return partial(_transaction, engine)


def bootstrap_database(config: BaseConfig | None = None) -> tuple[Engine, SessionFactory]:
    """Build the engine for ``config``, ensure the schema and return (engine, factory)."""

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    tables = init_database(engine)
    logger.info(
        "Database ready",
        extra={
            "database": engine.url.render_as_string(hide_password=True),
            "storage": cfg.STORAGE_BACKEND,
            "tables": tables,
        },
    )
    return engine, create_session_factory(engine)
