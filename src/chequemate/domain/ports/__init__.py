"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import GameHistory, RecentGamesFetcher
from .notifications import VICTORY_NOTIFICATION, NotificationDispatcher
from .persistence import (
    ChallengeRepository,
    MatchResultRepository,
    OngoingMatchRepository,
    Repository,
)
from .unit_of_work import (
    DuplicateRecordError,
    MatchRepositories,
    MatchUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "VICTORY_NOTIFICATION",
    "ChallengeRepository",
    "DuplicateRecordError",
    "GameHistory",
    "MatchRepositories",
    "MatchResultRepository",
    "MatchUnitOfWork",
    "NotificationDispatcher",
    "OngoingMatchRepository",
    "RecentGamesFetcher",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
