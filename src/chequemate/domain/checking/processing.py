"""Shared processing step: settle a match once and tell the winner."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from chequemate.domain.errors import ValidationError
from chequemate.domain.model import MatchOutcome
from chequemate.domain.ports import VICTORY_NOTIFICATION

if TYPE_CHECKING:
    from datetime import datetime
    from typing import Any
    from uuid import UUID

    from chequemate.domain.lifecycle_store import MatchLifecycleStore
    from chequemate.domain.model import MatchedGame, MatchResult, OngoingMatch
    from chequemate.domain.ports import NotificationDispatcher

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessingOutcome:
    """What a single processing call achieved.

    ``recorded`` is false when another writer had already settled the match.
    """

    match_id: UUID
    recorded: bool
    result: MatchResult | None = None
    notified: bool = False


def victory_message(opponent_handle: str) -> str:
    return f"Chequemate! You won against {opponent_handle}!"


class MatchResultProcessor:
    """Used by both checkers and the manual report path so they settle matches alike."""

    def __init__(self, store: MatchLifecycleStore, dispatcher: NotificationDispatcher) -> None:
        self._store = store
        self._dispatcher = dispatcher

    def process(self, match_id: UUID, matched: MatchedGame) -> ProcessingOutcome:
        match = self._store.get_match(match_id)
        if match.result_checked:
            log.debug("Match %s already settled; ignoring game %s", match_id, matched.game_url)
            return ProcessingOutcome(match_id=match_id, recorded=False)

        winner_id: UUID | None = None
        loser_id: UUID | None = None
        if matched.outcome == MatchOutcome.WIN:
            winner_id = _resolve(match, matched.winner_handle)
            loser_id = _resolve(match, matched.loser_handle)

        return self._settle(
            match,
            winner_id=winner_id,
            loser_id=loser_id,
            outcome=matched.outcome,
            game_url=matched.game_url,
            match_date=matched.ended_at,
            evidence=matched.evidence(),
        )

    def process_report(
        self,
        match_id: UUID,
        winner_id: UUID | None,
        *,
        game_url: str | None = None,
    ) -> ProcessingOutcome:
        """Settle a match from a participant's own report; ``None`` reports a draw."""

        match = self._store.get_match(match_id)
        if match.result_checked:
            return ProcessingOutcome(match_id=match_id, recorded=False)
        if winner_id is None:
            outcome, loser_id = MatchOutcome.DRAW, None
        else:
            try:
                loser_id = match.other_participant(winner_id)
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
            outcome = MatchOutcome.WIN
        return self._settle(
            match,
            winner_id=winner_id,
            loser_id=loser_id,
            outcome=outcome,
            game_url=game_url,
            match_date=None,
            evidence={"source": "manual", "game_url": game_url, "result": str(outcome)},
        )

    def _settle(  # noqa: PLR0913
        self,
        match: OngoingMatch,
        *,
        winner_id: UUID | None,
        loser_id: UUID | None,
        outcome: MatchOutcome,
        game_url: str | None,
        match_date: datetime | None,
        evidence: dict[str, Any],
    ) -> ProcessingOutcome:
        record = self._store.finalize_match(
            match.id,
            winner_id=winner_id,
            loser_id=loser_id,
            outcome=outcome,
            game_url=game_url,
            match_date=match_date,
            evidence=evidence,
        )
        if record is None:
            return ProcessingOutcome(match_id=match.id, recorded=False)

        notified = False
        if winner_id is not None and loser_id is not None:
            notified = self._notify_winner(match, winner_id, loser_id, game_url)
        return ProcessingOutcome(match_id=match.id, recorded=True, result=record, notified=notified)

    def _notify_winner(
        self,
        match: OngoingMatch,
        winner_id: UUID,
        loser_id: UUID,
        game_url: str | None,
    ) -> bool:
        opponent = match.handle_for(loser_id)
        payload = {
            "message": victory_message(opponent),
            "opponent": opponent,
            "platform": str(match.platform),
            "game_url": game_url,
        }
        try:
            return self._dispatcher.deliver(winner_id, VICTORY_NOTIFICATION, payload)
        except Exception:
            # The result is already persisted; a lost notification is acceptable.
            log.exception("Failed to notify winner %s of match %s", winner_id, match.id)
            return False


def _resolve(match: OngoingMatch, handle: str | None) -> UUID:
    user_id = match.user_id_for_handle(handle) if handle else None
    if user_id is None:
        raise ValidationError(f"handle {handle!r} is not a participant of match {match.id}")
    return user_id


__all__ = ["MatchResultProcessor", "ProcessingOutcome", "victory_message"]
