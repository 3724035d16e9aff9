from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from chequemate.domain.time_windows import EligibilityWindow, elapsed_since, ensure_aware

if TYPE_CHECKING:
    from chequemate.domain.time_windows import Clock


def _make_clock(reference: datetime) -> Clock:
    def _clock() -> datetime:
        return reference

    return _clock


def test_cutoff_is_match_start_when_recent() -> None:
    now = datetime(2025, 1, 10, 12, 0, tzinfo=UTC)
    started = now - timedelta(minutes=5)
    window = EligibilityWindow(started_at=started, lookback=timedelta(minutes=15))

    cutoff, resolved_now = window.resolve(clock=_make_clock(now))

    assert cutoff == started
    assert resolved_now == now


def test_cutoff_is_lookback_when_match_is_old() -> None:
    now = datetime(2025, 1, 10, 12, 0, tzinfo=UTC)
    window = EligibilityWindow(started_at=now - timedelta(hours=1), lookback=timedelta(minutes=15))

    cutoff, _ = window.resolve(clock=_make_clock(now))

    assert cutoff == now - timedelta(minutes=15)
    assert window.contains(now - timedelta(minutes=10), clock=_make_clock(now))
    assert not window.contains(now - timedelta(minutes=20), clock=_make_clock(now))


def test_negative_lookback_is_rejected() -> None:
    now = datetime(2025, 1, 10, tzinfo=UTC)
    window = EligibilityWindow(started_at=now, lookback=timedelta(minutes=-1))

    with pytest.raises(ValueError, match="non-negative"):
        window.resolve(clock=_make_clock(now))


def test_naive_datetimes_are_treated_as_utc() -> None:
    naive = datetime(2025, 1, 10, 12, 0)  # noqa: DTZ001
    assert ensure_aware(naive) == datetime(2025, 1, 10, 12, 0, tzinfo=UTC)
    assert elapsed_since(naive, clock=_make_clock(datetime(2025, 1, 10, 12, 8, tzinfo=UTC))) == (
        timedelta(minutes=8)
    )
