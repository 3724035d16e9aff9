"""Chess.com game history adapter."""

from __future__ import annotations

from .client import ChessComAPIError, ChessComFetcher
from .schema import ArchivesResponse, GamePayload, GamePlayer, MonthlyGamesResponse
from .translator import translate_game

__all__ = [
    "ArchivesResponse",
    "ChessComAPIError",
    "ChessComFetcher",
    "GamePayload",
    "GamePlayer",
    "MonthlyGamesResponse",
    "translate_game",
]
