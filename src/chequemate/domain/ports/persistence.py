"""Ports for persisting challenges, tracked matches and results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from chequemate.domain.model import Challenge, MatchResult, OngoingMatch

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from chequemate.domain.model import MatchOutcome


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class ChallengeRepository(Repository[Challenge], Protocol):
    """Persistence contract for challenges."""

    def delete(self, challenge: Challenge) -> None: ...


@runtime_checkable
class OngoingMatchRepository(Repository[OngoingMatch], Protocol):
    """Persistence contract for externally tracked matches."""

    def get_by_challenge(self, challenge_id: UUID) -> OngoingMatch | None: ...

    def delete(self, match: OngoingMatch) -> None: ...

    def list_ready(self) -> Sequence[OngoingMatch]: ...

    def claim_result_check(
        self,
        match_id: UUID,
        *,
        outcome: MatchOutcome,
        winner_id: UUID | None,
        evidence: dict[str, Any] | None,
        completed_at: datetime,
    ) -> bool:
        """Flip ``result_checked`` false -> true; return False if it was already true."""
        ...


@runtime_checkable
class MatchResultRepository(Repository[MatchResult], Protocol):
    """Persistence contract for write-once match results."""

    def get_by_challenge(self, challenge_id: UUID) -> MatchResult | None: ...
