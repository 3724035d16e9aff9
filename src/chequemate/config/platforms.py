"""Chess.com and Lichess configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float, optional_env_int, optional_env_str
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy, ShouldCacheHook

CHESS_COM_BASE_URL = "https://api.chess.com/pub/"
LICHESS_BASE_URL = "https://lichess.org/api/"
DEFAULT_USER_AGENT = "chequemate/1.0 (+https://github.com/chequemate)"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_RECENT_GAMES_LIMIT = 10
ARCHIVE_INDEX_TTL_SECONDS = 300.0
LICHESS_PERF_TYPES = ("ultraBullet", "bullet", "blitz", "rapid", "classical")


@dataclass(frozen=True, slots=True)
class ChessComConfig:
    """Holds Chess.com public API configuration values."""

    resilience: ResilienceConfig
    recent_games_limit: int = DEFAULT_RECENT_GAMES_LIMIT


@dataclass(frozen=True, slots=True)
class LichessConfig:
    """Holds Lichess public API configuration values."""

    resilience: ResilienceConfig
    recent_games_limit: int = DEFAULT_RECENT_GAMES_LIMIT
    perf_types: tuple[str, ...] = LICHESS_PERF_TYPES


def _user_agent() -> str:
    return optional_env_str("CHEQUEMATE_USER_AGENT", DEFAULT_USER_AGENT)


def _timeout() -> float:
    return optional_env_float(
        "CHEQUEMATE_FETCH_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS, minimum=0.1
    )


def _recent_games_limit() -> int:
    return optional_env_int(
        "CHEQUEMATE_RECENT_GAMES_LIMIT", DEFAULT_RECENT_GAMES_LIMIT, minimum=1
    )


def get_chess_com_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> ChessComConfig:
    return ChessComConfig(
        resilience=resilience
        or ResilienceConfig(
            name="chess.com",
            base_url=CHESS_COM_BASE_URL,
            timeout_seconds=_timeout(),
            retry=RetryPolicy(total=2),
            ratelimit=RateLimit(max_calls=3, per_seconds=1.0),
            cache=CacheConfig(
                default_ttl_seconds=ARCHIVE_INDEX_TTL_SECONDS,
                should_cache=cache_predicate,
            ),
            default_headers={"User-Agent": _user_agent(), "Accept": "application/json"},
        ),
        recent_games_limit=_recent_games_limit(),
    )


def get_lichess_config(*, resilience: ResilienceConfig | None = None) -> LichessConfig:
    return LichessConfig(
        resilience=resilience
        or ResilienceConfig(
            name="lichess.org",
            base_url=LICHESS_BASE_URL,
            timeout_seconds=_timeout(),
            retry=RetryPolicy(total=2),
            # Lichess asks API consumers to keep to one request at a time
            ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
            cache=None,
            default_headers={"User-Agent": _user_agent(), "Accept": "application/x-ndjson"},
        ),
        recent_games_limit=_recent_games_limit(),
    )
