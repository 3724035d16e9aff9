"""Ports for fetching external game history."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from chequemate.domain.model import NormalizedGame, Platform


@runtime_checkable
class RecentGamesFetcher(Protocol):
    """One platform's strategy for listing a player's recently finished games.

    Implementations never raise for transport or payload problems; they return an
    empty sequence instead.
    """

    async def fetch_recent_games(self, handle: str) -> Sequence[NormalizedGame]: ...


@runtime_checkable
class GameHistory(Protocol):
    """Platform-independent entry point used by the result matcher."""

    async def fetch_recent_games(
        self, handle: str, platform: Platform
    ) -> Sequence[NormalizedGame]: ...


__all__ = ["GameHistory", "RecentGamesFetcher"]
