"""Translate Lichess game payloads into platform-neutral games."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Final

from chequemate.domain.model import LOSS_TOKEN, WIN_TOKEN, NormalizedGame, Platform, Side

from .schema import GamePayload

LICHESS_GAME_URL = "https://lichess.org"
DRAW_RESULT: Final[str] = "draw"

# Statuses for games that never reached a result.
UNFINISHED_STATUSES: Final[frozenset[str]] = frozenset(
    {"created", "started", "aborted", "noStart", "unknownFinish"}
)


def _epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=UTC)


def _result_tokens(game: GamePayload) -> tuple[str, str]:
    if game.winner == Side.WHITE:
        return WIN_TOKEN, LOSS_TOKEN
    if game.winner == Side.BLACK:
        return LOSS_TOKEN, WIN_TOKEN
    return DRAW_RESULT, DRAW_RESULT


def is_translatable(game: GamePayload) -> bool:
    """Finished games between two registered humans."""

    if game.status in UNFINISHED_STATUSES:
        return False
    return game.players.white.user is not None and game.players.black.user is not None


def translate_game(game: GamePayload) -> NormalizedGame | None:
    white, black = game.players.white, game.players.black
    if not is_translatable(game) or white.user is None or black.user is None:
        return None
    white_result, black_result = _result_tokens(game)
    time_control = None
    if game.clock is not None and game.clock.initial % 60 == 0:
        time_control = f"{game.clock.initial // 60}+{game.clock.increment}"
    return NormalizedGame(
        platform=Platform.LICHESS,
        game_id=game.id,
        white_handle=white.user.name,
        black_handle=black.user.name,
        white_result=white_result,
        black_result=black_result,
        ended_at=_epoch_ms(game.last_move_at or game.created_at),
        url=f"{LICHESS_GAME_URL}/{game.id}",
        time_control=time_control,
        white_rating=white.rating,
        black_rating=black.rating,
        end_reason=game.status,
    )
