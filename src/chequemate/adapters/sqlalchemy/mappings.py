"""SQLAlchemy mapping metadata for the chequemate domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    String,
    Table,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from chequemate.domain.model import (
    Challenge,
    ChallengeStatus,
    MatchOutcome,
    MatchResult,
    OngoingMatch,
    Platform,
    TimeControl,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class TimeControlType(TypeDecorator[TimeControl]):
    """Store a time control as its ``minutes+increment`` label."""

    impl = String(16)
    cache_ok = True

    def process_bind_param(self, value: TimeControl | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return value.label

    def process_result_value(self, value: str | None, dialect: Dialect) -> TimeControl | None:
        _ = dialect
        return TimeControl.try_parse(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

challenge_table = Table(
    "challenge",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("challenger_id", UUIDColumnType, nullable=False),
    Column("opponent_id", UUIDColumnType, nullable=False),
    Column("challenger_handle", String, nullable=False),
    Column("opponent_handle", String, nullable=False),
    Column("platform", Enum(Platform, native_enum=False), nullable=False),
    Column("time_control", TimeControlType, nullable=True),
    Column("rules", String, nullable=False),
    Column("status", Enum(ChallengeStatus, native_enum=False), nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=True),
    Index("ix_challenge_status", "status"),
)

ongoing_match_table = Table(
    "ongoing_match",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "challenge_id",
        UUIDColumnType,
        ForeignKey("challenge.id"),
        nullable=False,
        unique=True,
    ),
    Column("challenger_id", UUIDColumnType, nullable=False),
    Column("opponent_id", UUIDColumnType, nullable=False),
    Column("challenger_handle", String, nullable=False),
    Column("opponent_handle", String, nullable=False),
    Column("platform", Enum(Platform, native_enum=False), nullable=False),
    Column("time_control", TimeControlType, nullable=True),
    Column("match_started_at", UTCDateTime, nullable=False),
    Column("challenger_redirected", Boolean, nullable=False, default=False),
    Column("opponent_redirected", Boolean, nullable=False, default=False),
    Column("both_redirected", Boolean, nullable=False, default=False),
    Column("result_checked", Boolean, nullable=False, default=False),
    Column("outcome", Enum(MatchOutcome, native_enum=False), nullable=True),
    Column("winner_id", UUIDColumnType, nullable=True),
    Column("match_result", JSON, nullable=True),
    Column("completed_at", UTCDateTime, nullable=True),
    Index("ix_ongoing_match_ready", "both_redirected", "result_checked"),
)

match_result_table = Table(
    "match_result",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "challenge_id",
        UUIDColumnType,
        ForeignKey("challenge.id"),
        nullable=False,
        unique=True,
    ),
    Column("result", Enum(MatchOutcome, native_enum=False), nullable=False),
    Column("platform", Enum(Platform, native_enum=False), nullable=False),
    Column("winner_id", UUIDColumnType, nullable=True),
    Column("loser_id", UUIDColumnType, nullable=True),
    Column("game_url", String, nullable=True),
    Column("match_date", UTCDateTime, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Challenge, challenge_table)
    mapper_registry.map_imperatively(OngoingMatch, ongoing_match_table)
    mapper_registry.map_imperatively(MatchResult, match_result_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
