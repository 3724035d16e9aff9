"""HTTP client for the Lichess public API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from chequemate.adapters.http_resilience import ResilientClient
from chequemate.config import LichessConfig, get_lichess_config
from chequemate.domain.model import utcnow
from chequemate.domain.ports.fetching import RecentGamesFetcher

from .schema import GamePayload, UserProfile
from .translator import translate_game

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from chequemate.config import ResilienceConfig
    from chequemate.domain.model import NormalizedGame
    from chequemate.domain.time_windows import Clock

log = getLogger(__name__)

DEFAULT_HISTORY_WINDOW = timedelta(hours=2)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class LichessAPIError(RuntimeError):
    """Raised when Lichess answers with an unexpected status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class LichessFetcher:
    """List a player's recently finished Lichess games from the NDJSON export."""

    config: LichessConfig = field(default_factory=get_lichess_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    history_window: timedelta = DEFAULT_HISTORY_WINDOW
    clock: Clock = utcnow
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
        try:
            async with asyncio.timeout(self.config.resilience.timeout_seconds):
                return await self._fetch_recent_games(handle)
        except (httpx.HTTPError, LichessAPIError, TimeoutError) as exc:
            log.warning("Lichess fetch for %s failed: %s", handle, exc or type(exc).__name__)
        return ()

    async def player_exists(self, handle: str) -> bool | None:
        """Whether Lichess knows an open account; ``None`` when the API could not be reached."""

        try:
            response = await self.client.get(
                f"user/{handle}", headers={"Accept": "application/json"}
            )
        except httpx.HTTPError as exc:
            log.warning("Lichess player lookup for %s failed: %s", handle, exc)
            return None
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        if response.status_code != httpx.codes.OK:
            log.warning("Lichess player lookup for %s returned %s", handle, response.status_code)
            return None
        try:
            profile = UserProfile.model_validate_json(response.content)
        except ValidationError as exc:
            log.warning("Lichess returned an unexpected profile for %s: %s", handle, exc)
            return None
        return not (profile.disabled or profile.closed)

    async def _fetch_recent_games(self, handle: str) -> Sequence[NormalizedGame]:
        since = self.clock() - self.history_window
        params = {
            "max": self.config.recent_games_limit,
            "since": int(since.timestamp() * 1000),
            "perfType": ",".join(self.config.perf_types),
        }
        response = await self.client.get(f"games/user/{handle}", params=params)
        if response.status_code != httpx.codes.OK:
            raise LichessAPIError(
                f"GET games/user/{handle} returned {response.status_code}",
                status_code=response.status_code,
            )

        games: list[NormalizedGame] = []
        for line in response.text.splitlines():
            if not line.strip():
                continue
            try:
                payload = GamePayload.model_validate_json(line)
            except ValidationError as exc:
                log.warning("Skipping unexpected Lichess game for %s: %s", handle, exc)
                continue
            game = translate_game(payload)
            if game is not None:
                games.append(game)
        log.debug("Fetched %d finished Lichess games for %s", len(games), handle)
        return games


if TYPE_CHECKING:
    _fetcher_check: RecentGamesFetcher = LichessFetcher()
