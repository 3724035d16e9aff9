"""Utilities for deciding which externally finished games are recent enough to count."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Normalise to UTC; naive values are taken to already be UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def elapsed_since(moment: datetime, *, clock: Clock = _utcnow) -> timedelta:
    return ensure_aware(clock()) - ensure_aware(moment)


@dataclass(frozen=True)
class EligibilityWindow:
    """Describe the span in which a finished game may belong to a tracked match.

    A game qualifies when it ended after the match was started and within
    ``lookback`` of now.
    """

    started_at: datetime
    lookback: timedelta

    def resolve(self, *, clock: Clock = _utcnow) -> tuple[datetime, datetime]:
        """Resolve the window into concrete UTC ``(cutoff, now)`` timestamps."""

        if self.lookback < timedelta(0):
            raise ValueError("Lookback duration must be non-negative")
        now = ensure_aware(clock())
        cutoff = max(ensure_aware(self.started_at), now - self.lookback)
        return cutoff, now

    def contains(self, moment: datetime, *, clock: Clock = _utcnow) -> bool:
        cutoff, _ = self.resolve(clock=clock)
        return ensure_aware(moment) >= cutoff


__all__ = ["Clock", "EligibilityWindow", "elapsed_since", "ensure_aware"]
