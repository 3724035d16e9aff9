from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from chequemate.config import (
    ConfigurationError,
    ReconciliationConfig,
    get_chess_com_config,
    get_database_config,
    get_lichess_config,
    get_reconciliation_config,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_reconciliation_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CHEQUEMATE_CHECK_INTERVAL_SECONDS",
        "CHEQUEMATE_MAX_CHECKS_PER_MATCH",
        "CHEQUEMATE_SWEEP_MIN_AGE_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    config = get_reconciliation_config()

    assert config.check_interval == timedelta(seconds=20)
    assert config.max_checks_per_match == 50
    assert config.sweep_interval == timedelta(minutes=5)
    assert config.sweep_min_age == timedelta(minutes=10)


def test_reconciliation_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHEQUEMATE_CHECK_INTERVAL_SECONDS", "5")
    monkeypatch.setenv("CHEQUEMATE_MAX_CHECKS_PER_MATCH", "3")
    monkeypatch.setenv("CHEQUEMATE_GIVE_UP_AFTER_SECONDS", "120")

    config = get_reconciliation_config()

    assert config.check_interval == timedelta(seconds=5)
    assert config.max_checks_per_match == 3
    assert config.give_up_after == timedelta(minutes=2)


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("CHEQUEMATE_MAX_CHECKS_PER_MATCH", "0"),
        ("CHEQUEMATE_MAX_CHECKS_PER_MATCH", "many"),
        ("CHEQUEMATE_CHECK_INTERVAL_SECONDS", "0"),
        ("CHEQUEMATE_SWEEP_INTERVAL_SECONDS", "-1"),
    ],
)
def test_reconciliation_rejects_invalid_overrides(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_reconciliation_config()


def test_reconciliation_config_validates_directly() -> None:
    with pytest.raises(ConfigurationError):
        ReconciliationConfig(max_checks_per_match=0)
    with pytest.raises(ConfigurationError):
        ReconciliationConfig(give_up_after=timedelta(seconds=-1))


def test_platform_configs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHEQUEMATE_USER_AGENT", "tester/0.1")
    monkeypatch.setenv("CHEQUEMATE_RECENT_GAMES_LIMIT", "4")

    chess_com = get_chess_com_config(cache_predicate=bool)
    lichess = get_lichess_config()

    assert chess_com.recent_games_limit == 4
    assert chess_com.resilience.default_headers is not None
    assert chess_com.resilience.default_headers["User-Agent"] == "tester/0.1"
    assert chess_com.resilience.cache is not None
    assert chess_com.resilience.cache.should_cache is bool
    assert lichess.resilience.cache is None
    assert lichess.resilience.ratelimit is not None
    assert lichess.resilience.ratelimit.max_calls == 1


def test_database_uri_defaults_to_sqlite_in_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    data_dir = tmp_path / "data"
    monkeypatch.setenv("CHEQUEMATE_DATA_DIR", str(data_dir))
    monkeypatch.delenv("DATABASE_URI", raising=False)

    config = get_database_config()

    assert config.uri == f"sqlite+pysqlite:///{data_dir.resolve() / 'chequemate.db'}"
    assert data_dir.is_dir()


def test_database_uri_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://localhost/chequemate")

    assert get_database_config(data_dir=tmp_path).uri == (
        "postgresql+psycopg://localhost/chequemate"
    )
