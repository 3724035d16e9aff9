"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update

from chequemate.adapters.sqlalchemy.mappings import (
    match_result_table,
    ongoing_match_table,
)
from chequemate.domain.model import Challenge, MatchResult, OngoingMatch

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy.orm import Session

    from chequemate.domain.model import MatchOutcome


class SqlAlchemyRepository[TEntity]:
    """Shared session handling for the aggregate repositories."""

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> TEntity | None:
        return self.session.get(self._entity_cls, entity_id)


class SqlAlchemyChallengeRepository(SqlAlchemyRepository[Challenge]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Challenge)

    def delete(self, challenge: Challenge) -> None:
        self.session.delete(challenge)


class SqlAlchemyOngoingMatchRepository(SqlAlchemyRepository[OngoingMatch]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, OngoingMatch)

    def get_by_challenge(self, challenge_id: UUID) -> OngoingMatch | None:
        stmt = select(OngoingMatch).where(ongoing_match_table.c.challenge_id == challenge_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def delete(self, match: OngoingMatch) -> None:
        # Must reach the database before the owning challenge row is deleted.
        self.session.delete(match)
        self.session.flush()

    def list_ready(self) -> Sequence[OngoingMatch]:
        stmt = (
            select(OngoingMatch)
            .where(ongoing_match_table.c.both_redirected.is_(True))
            .where(ongoing_match_table.c.result_checked.is_(False))
            .order_by(ongoing_match_table.c.match_started_at)
        )
        return self.session.execute(stmt).scalars().all()

    def claim_result_check(
        self,
        match_id: UUID,
        *,
        outcome: MatchOutcome,
        winner_id: UUID | None,
        evidence: dict[str, Any] | None,
        completed_at: datetime,
    ) -> bool:
        # Conditional flip: concurrent writers race on this row and only one sees rowcount 1.
        stmt = (
            update(OngoingMatch)
            .where(ongoing_match_table.c.id == match_id)
            .where(ongoing_match_table.c.result_checked.is_(False))
            .values(
                {
                    "result_checked": True,
                    "outcome": outcome,
                    "winner_id": winner_id,
                    "match_result": evidence,
                    "completed_at": completed_at,
                }
            )
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1  # pyright: ignore[reportAttributeAccessIssue]


class SqlAlchemyMatchResultRepository(SqlAlchemyRepository[MatchResult]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, MatchResult)

    def get_by_challenge(self, challenge_id: UUID) -> MatchResult | None:
        stmt = select(MatchResult).where(match_result_table.c.challenge_id == challenge_id)
        return self.session.execute(stmt).scalar_one_or_none()
