"""Platform-neutral view of externally played games."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from chequemate.domain.model.enums import MatchOutcome, Side

if TYPE_CHECKING:
    from datetime import datetime

    from chequemate.domain.model.enums import Platform

WIN_TOKEN: Final[str] = "win"
LOSS_TOKEN: Final[str] = "lose"
DRAW_TOKENS: Final[frozenset[str]] = frozenset(
    {
        "draw",
        "agreed",
        "repetition",
        "stalemate",
        "insufficient",
        "50move",
        "timevsinsufficient",
    }
)


@dataclass(frozen=True, slots=True)
class NormalizedGame:
    """One finished game as reported by a platform's public history."""

    platform: Platform
    game_id: str
    white_handle: str
    black_handle: str
    white_result: str
    black_result: str
    ended_at: datetime
    url: str
    time_control: str | None = None
    white_rating: int | None = None
    black_rating: int | None = None
    end_reason: str | None = None

    def handle(self, side: Side) -> str:
        return self.white_handle if side is Side.WHITE else self.black_handle

    def result_token(self, side: Side) -> str:
        return self.white_result if side is Side.WHITE else self.black_result

    def involves_pair(self, first: str, second: str) -> bool:
        """Whether the two handles played this game, in either colour assignment."""

        players = (self.white_handle.casefold(), self.black_handle.casefold())
        wanted = (first.casefold(), second.casefold())
        return players in (wanted, wanted[::-1])

    def winning_sides(self) -> tuple[Side, ...]:
        return tuple(side for side in Side if self.result_token(side) == WIN_TOKEN)

    def is_draw_family(self) -> bool:
        return self.white_result in DRAW_TOKENS and self.black_result in DRAW_TOKENS


@dataclass(frozen=True, slots=True)
class MatchedGame:
    """The game identified as ``ours`` plus the outcome derived from it."""

    game: NormalizedGame
    outcome: MatchOutcome
    winner_handle: str | None = None
    loser_handle: str | None = None

    @property
    def game_url(self) -> str:
        return self.game.url

    @property
    def ended_at(self) -> datetime:
        return self.game.ended_at

    def evidence(self) -> dict[str, Any]:
        """JSON-serialisable audit trail stored on the ongoing match."""

        game = self.game
        return {
            "platform": str(game.platform),
            "game_id": game.game_id,
            "game_url": game.url,
            "ended_at": game.ended_at.isoformat(),
            "white": game.white_handle,
            "black": game.black_handle,
            "white_result": game.white_result,
            "black_result": game.black_result,
            "white_rating": game.white_rating,
            "black_rating": game.black_rating,
            "time_control": game.time_control,
            "end_reason": game.end_reason,
            "result": str(self.outcome),
            "winner": self.winner_handle,
        }
