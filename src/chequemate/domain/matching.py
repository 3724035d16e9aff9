"""Heuristic that identifies the externally played game behind a tracked match.

The platforms expose no link between our challenge and their game, so a game is
taken to be ours when both handles played it and it ended inside the eligibility
window. Two games between the same pair inside the window (a rematch) cannot be
told apart; the most recent one wins and its URL is kept as evidence so the choice
can be audited.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from chequemate.domain.model import MatchedGame, MatchOutcome, NormalizedGame, Side, utcnow
from chequemate.domain.time_windows import EligibilityWindow

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from chequemate.domain.model import Platform
    from chequemate.domain.ports import GameHistory
    from chequemate.domain.time_windows import Clock

log = getLogger(__name__)

DEFAULT_LOOKBACK = timedelta(minutes=15)


def derive_outcome(game: NormalizedGame) -> tuple[MatchOutcome, Side | None]:
    """Return the outcome and, for a win, the winning side.

    Exactly one side reporting ``win`` is a win; anything else (both drawn, mutual
    non-win codes) is treated as a draw.
    """

    winners = game.winning_sides()
    if len(winners) == 1:
        return MatchOutcome.WIN, winners[0]
    return MatchOutcome.DRAW, None


def to_matched_game(game: NormalizedGame) -> MatchedGame:
    outcome, side = derive_outcome(game)
    if side is None:
        return MatchedGame(game=game, outcome=outcome)
    loser = Side.BLACK if side is Side.WHITE else Side.WHITE
    return MatchedGame(
        game=game,
        outcome=outcome,
        winner_handle=game.handle(side),
        loser_handle=game.handle(loser),
    )


def select_match(
    games: Iterable[NormalizedGame],
    *,
    challenger: str,
    opponent: str,
    started_at: datetime,
    lookback: timedelta = DEFAULT_LOOKBACK,
    clock: Clock = utcnow,
) -> MatchedGame | None:
    """Pick the most recent eligible game between the two handles, if any."""

    window = EligibilityWindow(started_at=started_at, lookback=lookback)
    cutoff, _ = window.resolve(clock=clock)
    eligible = [game for game in games if game.ended_at >= cutoff]
    eligible.sort(key=lambda game: game.ended_at, reverse=True)
    for game in eligible:
        if game.involves_pair(challenger, opponent):
            return to_matched_game(game)
    return None


@dataclass(slots=True)
class ResultMatcher:
    """Look up a match's result through the game history port."""

    history: GameHistory
    lookback: timedelta = DEFAULT_LOOKBACK
    clock: Clock = utcnow

    async def find_result(
        self,
        challenger: str,
        opponent: str,
        platform: Platform,
        started_at: datetime,
    ) -> MatchedGame | None:
        games = await self.history.fetch_recent_games(challenger, platform)
        matched = select_match(
            games,
            challenger=challenger,
            opponent=opponent,
            started_at=started_at,
            lookback=self.lookback,
            clock=self.clock,
        )
        if matched is None:
            log.debug(
                "No eligible game between %s and %s on %s among %d fetched",
                challenger,
                opponent,
                platform,
                len(games),
            )
        return matched


__all__ = ["DEFAULT_LOOKBACK", "ResultMatcher", "derive_outcome", "select_match", "to_matched_game"]
