"""Lichess game history adapter."""

from __future__ import annotations

from .client import LichessAPIError, LichessFetcher
from .schema import GamePayload, GamePlayer, GamePlayers, LichessUser, UserProfile
from .translator import UNFINISHED_STATUSES, is_translatable, translate_game

__all__ = [
    "UNFINISHED_STATUSES",
    "GamePayload",
    "GamePlayer",
    "GamePlayers",
    "LichessAPIError",
    "LichessFetcher",
    "LichessUser",
    "UserProfile",
    "is_translatable",
    "translate_game",
]
