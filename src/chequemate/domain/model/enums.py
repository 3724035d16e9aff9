"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Platform(StrEnum):
    CHESS_COM = "chess.com"
    LICHESS = "lichess.org"


class ChallengeStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"
    STARTED = "started"
    COMPLETED = "completed"


class MatchOutcome(StrEnum):
    """Terminal outcome of an externally tracked match.

    ``UNRESOLVED`` marks a match the checkers gave up on; it is never written to a
    ``MatchResult`` row.
    """

    WIN = "win"
    DRAW = "draw"
    UNRESOLVED = "unresolved"


class Side(StrEnum):
    WHITE = "white"
    BLACK = "black"
