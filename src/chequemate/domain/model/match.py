"""Externally tracked matches and their recorded results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from chequemate.domain.model.base import Entity, utcnow
from chequemate.domain.model.enums import MatchOutcome, Platform

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from chequemate.domain.model.challenge import Challenge
    from chequemate.domain.model.time_control import TimeControl


@dataclass(eq=False, kw_only=True)
class OngoingMatch(Entity):
    """The externally played game behind one started challenge.

    ``result_checked`` is the stop signal for every automated checker. ``outcome``
    distinguishes a real draw from a match the checkers gave up on.
    """

    challenge_id: UUID
    challenger_id: UUID
    opponent_id: UUID
    challenger_handle: str
    opponent_handle: str
    platform: Platform
    time_control: TimeControl | None = None
    match_started_at: datetime = field(default_factory=utcnow)
    challenger_redirected: bool = False
    opponent_redirected: bool = False
    both_redirected: bool = False
    result_checked: bool = False
    outcome: MatchOutcome | None = None
    winner_id: UUID | None = None
    match_result: dict[str, Any] | None = None
    completed_at: datetime | None = None

    @classmethod
    def for_challenge(cls, challenge: Challenge, *, started_at: datetime) -> OngoingMatch:
        return cls(
            challenge_id=challenge.id,
            challenger_id=challenge.challenger_id,
            opponent_id=challenge.opponent_id,
            challenger_handle=challenge.challenger_handle,
            opponent_handle=challenge.opponent_handle,
            platform=challenge.platform,
            time_control=challenge.time_control,
            match_started_at=started_at,
        )

    def mark_redirected(self, *, is_challenger: bool) -> bool:
        """Set one side's redirect flag; return True when both sides just became ready."""

        if is_challenger:
            self.challenger_redirected = True
        else:
            self.opponent_redirected = True
        ready = self.challenger_redirected and self.opponent_redirected
        newly_ready = ready and not self.both_redirected
        self.both_redirected = ready
        return newly_ready

    def user_id_for_handle(self, handle: str) -> UUID | None:
        folded = handle.casefold()
        if folded == self.challenger_handle.casefold():
            return self.challenger_id
        if folded == self.opponent_handle.casefold():
            return self.opponent_id
        return None

    def other_participant(self, user_id: UUID) -> UUID:
        if user_id == self.challenger_id:
            return self.opponent_id
        if user_id == self.opponent_id:
            return self.challenger_id
        raise ValueError(f"user {user_id} is not part of match {self.id}")

    def handle_for(self, user_id: UUID) -> str:
        if user_id == self.challenger_id:
            return self.challenger_handle
        if user_id == self.opponent_id:
            return self.opponent_handle
        raise ValueError(f"user {user_id} is not part of match {self.id}")


@dataclass(eq=False, kw_only=True)
class MatchResult(Entity):
    """Authoritative, write-once record of an observed outcome."""

    challenge_id: UUID
    result: MatchOutcome
    platform: Platform
    winner_id: UUID | None = None
    loser_id: UUID | None = None
    game_url: str | None = None
    match_date: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if self.result == MatchOutcome.UNRESOLVED:
            raise ValueError("unresolved matches do not produce a MatchResult")
        if self.result == MatchOutcome.WIN and (self.winner_id is None or self.loser_id is None):
            raise ValueError("a win requires both winner and loser")
        if self.result == MatchOutcome.DRAW and (
            self.winner_id is not None or self.loser_id is not None
        ):
            raise ValueError("a draw has neither winner nor loser")
