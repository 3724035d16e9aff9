from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from chequemate.adapters.sqlalchemy import create_all_tables, start_mappers
from chequemate.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMatchUnitOfWork,
    shutdown,
    startup,
)
from chequemate.domain.lifecycle_store import MatchLifecycleStore
from tests.helpers.matches import FakeClock

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyMatchUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyMatchUnitOfWork:
        return SqlAlchemyMatchUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyMatchUnitOfWork],
    clock: FakeClock,
) -> MatchLifecycleStore:
    return MatchLifecycleStore(sqlite_unit_of_work, clock=clock)
