from __future__ import annotations

import asyncio
import json
from collections.abc import Callable  # noqa: TC003
from datetime import UTC, datetime, timedelta

import httpx

from chequemate.adapters.lichess import LichessFetcher
from chequemate.config import LichessConfig, ResilienceConfig
from chequemate.config.platforms import LICHESS_BASE_URL
from tests.helpers.http import make_client_factory

NOW = datetime(2025, 3, 1, 12, 30, tzinfo=UTC)


def _game(game_id: str, *, status: str = "resign", winner: str | None = "white") -> str:
    payload: dict[str, object] = {
        "id": game_id,
        "status": status,
        "createdAt": int(NOW.timestamp() * 1000) - 600_000,
        "lastMoveAt": int(NOW.timestamp() * 1000) - 60_000,
        "players": {
            "white": {"user": {"name": "Alice"}},
            "black": {"user": {"name": "Bob"}},
        },
    }
    if winner is not None:
        payload["winner"] = winner
    return json.dumps(payload)


def _fetcher(handler: Callable[[httpx.Request], httpx.Response]) -> LichessFetcher:
    config = LichessConfig(
        resilience=ResilienceConfig(name="lichess.org", base_url=LICHESS_BASE_URL),
        recent_games_limit=5,
    )
    return LichessFetcher(
        config=config,
        client_factory=make_client_factory(handler),
        history_window=timedelta(hours=2),
        clock=lambda: NOW,
    )


def test_fetch_recent_games_parses_ndjson() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        body = "\n".join(
            [_game("aaaa1111"), "", _game("bbbb2222", status="started", winner=None)]
        )
        return httpx.Response(200, text=body + "\n")

    games = asyncio.run(_fetcher(handler).fetch_recent_games("Alice"))

    assert [game.game_id for game in games] == ["aaaa1111"]
    (request,) = requests
    assert request.url.path == "/api/games/user/Alice"
    assert request.url.params["max"] == "5"
    assert request.url.params["since"] == str(int((NOW - timedelta(hours=2)).timestamp() * 1000))
    assert "blitz" in request.url.params["perfType"].split(",")


def test_fetch_recent_games_swallows_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429)

    assert asyncio.run(_fetcher(handler).fetch_recent_games("Alice")) == ()


def test_malformed_lines_are_skipped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = "\n".join(['{"id": "x"}', _game("cccc3333"), "not json", _game("dddd4444")])
        return httpx.Response(200, text=body)

    games = asyncio.run(_fetcher(handler).fetch_recent_games("Alice"))

    assert [game.game_id for game in games] == ["cccc3333", "dddd4444"]


def test_player_exists() -> None:
    accept_headers: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        accept_headers.append(request.headers["Accept"])
        name = request.url.path.rsplit("/", 1)[-1]
        if name == "alice":
            return httpx.Response(200, json={"id": "alice", "username": "Alice"})
        if name == "closed":
            return httpx.Response(200, json={"id": "closed", "username": "Closed", "closed": True})
        if name == "ghost":
            return httpx.Response(404)
        return httpx.Response(500)

    fetcher = _fetcher(handler)

    async def scenario() -> list[bool | None]:
        try:
            return [
                await fetcher.player_exists(name) for name in ("alice", "closed", "ghost", "down")
            ]
        finally:
            await fetcher.aclose()

    assert asyncio.run(scenario()) == [True, False, False, None]
    assert set(accept_headers) == {"application/json"}
