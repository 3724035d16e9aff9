"""HTTP client for the Chess.com published-data API."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from chequemate.adapters.http_resilience import ResilientClient
from chequemate.config import ChessComConfig, get_chess_com_config
from chequemate.domain.ports.fetching import RecentGamesFetcher

from .schema import ArchivesResponse, MonthlyGamesResponse
from .translator import translate_game

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from chequemate.config import ResilienceConfig
    from chequemate.domain.model import NormalizedGame

log = getLogger(__name__)

# Two sequential requests (archive index, then the month) share one budget.
_FETCH_BUDGET_FACTOR = 2


def _should_cache_payload(payload: object) -> bool:
    """Only the archive index is stable enough to cache; game lists change constantly."""

    return isinstance(payload, dict) and "archives" in payload


def _default_config() -> ChessComConfig:
    return get_chess_com_config(cache_predicate=_should_cache_payload)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class ChessComAPIError(RuntimeError):
    """Raised when Chess.com answers with an unexpected status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class ChessComFetcher:
    """List a player's recently finished Chess.com games from the monthly archives."""

    config: ChessComConfig = field(default_factory=_default_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    @property
    def client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self._client

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def fetch_recent_games(self, handle: str) -> Sequence[NormalizedGame]:
        budget = self.config.resilience.timeout_seconds * _FETCH_BUDGET_FACTOR
        try:
            async with asyncio.timeout(budget):
                return await self._fetch_recent_games(handle)
        except (httpx.HTTPError, ChessComAPIError, TimeoutError) as exc:
            log.warning("Chess.com fetch for %s failed: %s", handle, exc or type(exc).__name__)
        except (ValidationError, json.JSONDecodeError) as exc:
            log.warning("Chess.com returned an unexpected payload for %s: %s", handle, exc)
        return ()

    async def player_exists(self, handle: str) -> bool | None:
        """Whether Chess.com knows the handle; ``None`` when the API could not be reached."""

        try:
            response = await self.client.get(f"player/{handle.lower()}")
        except httpx.HTTPError as exc:
            log.warning("Chess.com player lookup for %s failed: %s", handle, exc)
            return None
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        if response.status_code != httpx.codes.OK:
            log.warning("Chess.com player lookup for %s returned %s", handle, response.status_code)
            return None
        return True

    async def _fetch_recent_games(self, handle: str) -> Sequence[NormalizedGame]:
        archives = await self._get_json(f"player/{handle.lower()}/games/archives")
        archive_urls = ArchivesResponse.model_validate(archives).archives
        if not archive_urls:
            log.info("Chess.com player %s has no game archives", handle)
            return ()

        # The last archive is the current month.
        monthly = MonthlyGamesResponse.model_validate(await self._get_json(archive_urls[-1]))
        recent = monthly.games[-self.config.recent_games_limit :]
        games = [translate_game(game) for game in recent]
        log.debug("Fetched %d recent Chess.com games for %s", len(games), handle)
        return games

    async def _get_json(self, url: str) -> object:
        response = await self.client.get(url)
        if response.status_code != httpx.codes.OK:
            raise ChessComAPIError(
                f"GET {url} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response.json()


if TYPE_CHECKING:
    _fetcher_check: RecentGamesFetcher = ChessComFetcher()
