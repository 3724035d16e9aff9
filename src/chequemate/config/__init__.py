"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .platforms import (
    ChessComConfig,
    LichessConfig,
    get_chess_com_config,
    get_lichess_config,
)
from .reconciliation import ReconciliationConfig, get_reconciliation_config
from .storage import DatabaseConfig, get_database_config

__all__ = [
    "CacheConfig",
    "ChessComConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "LichessConfig",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "get_chess_com_config",
    "get_database_config",
    "get_lichess_config",
    "get_reconciliation_config",
]
