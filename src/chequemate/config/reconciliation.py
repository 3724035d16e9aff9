"""Timing knobs for the match-result checkers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import optional_env_float, optional_env_int
from .errors import ConfigurationError

DEFAULT_CHECK_INTERVAL = timedelta(seconds=20)
DEFAULT_MAX_CHECKS_PER_MATCH = 50
DEFAULT_MATCH_DURATION = timedelta(minutes=5)
DEFAULT_SWEEP_INTERVAL = timedelta(minutes=5)
DEFAULT_SWEEP_MIN_AGE = timedelta(minutes=10)
DEFAULT_GIVE_UP_AFTER = timedelta(hours=1)
DEFAULT_MATCH_LOOKBACK = timedelta(minutes=15)


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    """Scheduling and matching parameters shared by both checkers.

    ``give_up_after`` is measured from ``match_started_at``; test deployments usually
    shorten it so abandoned matches are closed out quickly.
    """

    check_interval: timedelta = DEFAULT_CHECK_INTERVAL
    max_checks_per_match: int = DEFAULT_MAX_CHECKS_PER_MATCH
    default_match_duration: timedelta = DEFAULT_MATCH_DURATION
    sweep_interval: timedelta = DEFAULT_SWEEP_INTERVAL
    sweep_min_age: timedelta = DEFAULT_SWEEP_MIN_AGE
    give_up_after: timedelta = DEFAULT_GIVE_UP_AFTER
    match_lookback: timedelta = DEFAULT_MATCH_LOOKBACK

    def __post_init__(self) -> None:
        if self.max_checks_per_match < 1:
            raise ConfigurationError("max_checks_per_match must be at least 1")
        for name in (
            "check_interval",
            "default_match_duration",
            "sweep_interval",
            "match_lookback",
        ):
            if getattr(self, name) <= timedelta(0):
                raise ConfigurationError(f"{name} must be positive")
        if self.sweep_min_age < timedelta(0) or self.give_up_after < timedelta(0):
            raise ConfigurationError("sweep ages must be non-negative")


def _seconds(name: str, default: timedelta) -> timedelta:
    return timedelta(seconds=optional_env_float(name, default.total_seconds()))


def get_reconciliation_config() -> ReconciliationConfig:
    """Build the checker configuration, honouring ``CHEQUEMATE_*`` overrides."""

    return ReconciliationConfig(
        check_interval=_seconds("CHEQUEMATE_CHECK_INTERVAL_SECONDS", DEFAULT_CHECK_INTERVAL),
        max_checks_per_match=optional_env_int(
            "CHEQUEMATE_MAX_CHECKS_PER_MATCH", DEFAULT_MAX_CHECKS_PER_MATCH, minimum=1
        ),
        default_match_duration=_seconds(
            "CHEQUEMATE_DEFAULT_MATCH_DURATION_SECONDS", DEFAULT_MATCH_DURATION
        ),
        sweep_interval=_seconds("CHEQUEMATE_SWEEP_INTERVAL_SECONDS", DEFAULT_SWEEP_INTERVAL),
        sweep_min_age=_seconds("CHEQUEMATE_SWEEP_MIN_AGE_SECONDS", DEFAULT_SWEEP_MIN_AGE),
        give_up_after=_seconds("CHEQUEMATE_GIVE_UP_AFTER_SECONDS", DEFAULT_GIVE_UP_AFTER),
        match_lookback=_seconds("CHEQUEMATE_MATCH_LOOKBACK_SECONDS", DEFAULT_MATCH_LOOKBACK),
    )
