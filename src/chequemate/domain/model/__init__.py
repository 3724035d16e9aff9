"""Domain model for challenges, tracked matches and observed games."""

from __future__ import annotations

from .base import Entity, new_id, utcnow
from .challenge import DEFAULT_RULES, Challenge
from .enums import ChallengeStatus, MatchOutcome, Platform, Side
from .games import DRAW_TOKENS, LOSS_TOKEN, WIN_TOKEN, MatchedGame, NormalizedGame
from .match import MatchResult, OngoingMatch
from .time_control import TimeControl, estimate_match_duration

__all__ = [
    "DEFAULT_RULES",
    "DRAW_TOKENS",
    "LOSS_TOKEN",
    "WIN_TOKEN",
    "Challenge",
    "ChallengeStatus",
    "Entity",
    "MatchOutcome",
    "MatchResult",
    "MatchedGame",
    "NormalizedGame",
    "OngoingMatch",
    "Platform",
    "Side",
    "TimeControl",
    "estimate_match_duration",
    "new_id",
    "utcnow",
]
