"""SQLAlchemy adapter package for chequemate."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyChallengeRepository,
    SqlAlchemyMatchResultRepository,
    SqlAlchemyOngoingMatchRepository,
)
from .unit_of_work import SqlAlchemyMatchUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyChallengeRepository",
    "SqlAlchemyMatchResultRepository",
    "SqlAlchemyMatchUnitOfWork",
    "SqlAlchemyOngoingMatchRepository",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
