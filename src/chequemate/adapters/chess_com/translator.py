"""Translate Chess.com game payloads into platform-neutral games."""

from __future__ import annotations

from datetime import UTC, datetime

from chequemate.domain.model import WIN_TOKEN, NormalizedGame, Platform

from .schema import GamePayload


def _time_control_label(raw: str | None) -> str | None:
    """``300+3`` (seconds) becomes ``5+3``; daily controls like ``1/259200`` stay as-is."""

    if not raw:
        return None
    base, _, increment = raw.partition("+")
    if not base.isdigit() or (increment and not increment.isdigit()):
        return raw
    seconds = int(base)
    if seconds % 60:
        return raw
    return f"{seconds // 60}+{int(increment or 0)}"


def _end_reason(game: GamePayload) -> str:
    if game.white.result == WIN_TOKEN:
        return game.black.result
    if game.black.result == WIN_TOKEN:
        return game.white.result
    return game.white.result


def translate_game(game: GamePayload) -> NormalizedGame:
    return NormalizedGame(
        platform=Platform.CHESS_COM,
        game_id=game.uuid or game.url.rsplit("/", 1)[-1],
        white_handle=game.white.username,
        black_handle=game.black.username,
        white_result=game.white.result,
        black_result=game.black.result,
        ended_at=datetime.fromtimestamp(game.end_time, tz=UTC),
        url=game.url,
        time_control=_time_control_label(game.time_control),
        white_rating=game.white.rating,
        black_rating=game.black.rating,
        end_reason=_end_reason(game),
    )
