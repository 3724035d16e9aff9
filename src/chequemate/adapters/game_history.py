"""Route game-history lookups to the right platform adapter."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from chequemate.adapters.chess_com import ChessComFetcher
from chequemate.adapters.lichess import LichessFetcher
from chequemate.domain.model import Platform
from chequemate.domain.ports.fetching import GameHistory, RecentGamesFetcher

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from chequemate.domain.model import NormalizedGame

log = getLogger(__name__)


class PlatformFetcher(RecentGamesFetcher, Protocol):
    async def player_exists(self, handle: str) -> bool | None: ...

    async def aclose(self) -> None: ...


class GameHistorySource:
    """One entry point over a per-platform set of fetch strategies."""

    def __init__(self, fetchers: Mapping[Platform, PlatformFetcher] | None = None) -> None:
        self._fetchers: dict[Platform, PlatformFetcher] = (
            dict(fetchers)
            if fetchers is not None
            else {Platform.CHESS_COM: ChessComFetcher(), Platform.LICHESS: LichessFetcher()}
        )

    def _fetcher(self, platform: Platform | str) -> PlatformFetcher | None:
        try:
            return self._fetchers.get(Platform(platform))
        except ValueError:
            return None

    async def fetch_recent_games(
        self, handle: str, platform: Platform | str
    ) -> Sequence[NormalizedGame]:
        fetcher = self._fetcher(platform)
        if fetcher is None:
            log.warning("No game history adapter for platform %r", platform)
            return ()
        return await fetcher.fetch_recent_games(handle)

    async def player_exists(self, handle: str, platform: Platform | str) -> bool | None:
        fetcher = self._fetcher(platform)
        if fetcher is None:
            log.warning("No game history adapter for platform %r", platform)
            return None
        return await fetcher.player_exists(handle)

    async def aclose(self) -> None:
        for fetcher in self._fetchers.values():
            await fetcher.aclose()


if TYPE_CHECKING:
    _history_check: GameHistory = GameHistorySource()
