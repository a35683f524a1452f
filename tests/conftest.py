from __future__ import annotations

import os
from datetime import UTC, datetime
from itertools import count
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from careermem.adapters.sqlalchemy import (
    SqlAlchemyMemoryUnitOfWork,
    create_all_tables,
    shutdown,
    startup,
)

# keep the suite away from the user's real data directory
os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic ``id-1``, ``id-2``, ... identifiers."""

    ids = (f"id-{n}" for n in count(1))
    return lambda: next(ids)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # StaticPool shares the one in-memory database across sessions
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_all_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyMemoryUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)
    yield SqlAlchemyMemoryUnitOfWork
    shutdown()
