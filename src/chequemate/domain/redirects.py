"""Links that drop a player straight into a challenge on the external platform."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

from chequemate.domain.model import Platform, TimeControl

if TYPE_CHECKING:
    from collections.abc import Callable

CHESS_COM_NEW_GAME_URL = "https://www.chess.com/play/online/new"
LICHESS_URL = "https://lichess.org"


def _chess_com_url(handle: str, time_control: TimeControl | None) -> str:
    url = f"{CHESS_COM_NEW_GAME_URL}?opponent={handle}"
    if time_control is None:
        return url
    # Chess.com wants the base time in seconds: time=300|3
    return f"{url}&time={time_control.base_seconds}|{time_control.increment}"


def _lichess_url(handle: str, time_control: TimeControl | None) -> str:
    if time_control is None:
        return f"{LICHESS_URL}/?user={handle}#friend"
    return f"{LICHESS_URL}/@/{handle}?time={time_control.minutes}+{time_control.increment}"


_BUILDERS: dict[Platform, Callable[[str, TimeControl | None], str]] = {
    Platform.CHESS_COM: _chess_com_url,
    Platform.LICHESS: _lichess_url,
}


def build_challenge_url(
    platform: Platform | str,
    opponent_handle: str,
    time_control: TimeControl | str | None = None,
) -> str:
    """Return the platform URL that opens a challenge against ``opponent_handle``.

    Unparseable time control labels fall back to the plain friend-challenge link.
    """

    if isinstance(time_control, str):
        time_control = TimeControl.try_parse(time_control)
    builder = _BUILDERS[Platform(platform)]
    return builder(quote(opponent_handle, safe=""), time_control)


__all__ = ["build_challenge_url"]
