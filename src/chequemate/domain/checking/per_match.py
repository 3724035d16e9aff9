"""Per-match checker: one asyncio task per tracked match.

Each task waits the estimated game length, then polls the platform every
``check_interval`` until a result is found, the match is settled elsewhere, or
``max_checks_per_match`` polls came up empty. The registry only schedules work;
the persisted ``result_checked`` flag decides whether a match still needs checking.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from chequemate.config import ReconciliationConfig
from chequemate.domain.errors import NotFoundError
from chequemate.domain.model import estimate_match_duration, utcnow

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import datetime
    from uuid import UUID

    from chequemate.domain.checking.processing import MatchResultProcessor
    from chequemate.domain.lifecycle_store import MatchLifecycleStore
    from chequemate.domain.matching import ResultMatcher
    from chequemate.domain.model import OngoingMatch, Platform, TimeControl
    from chequemate.domain.time_windows import Clock

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


class CheckState(StrEnum):
    WAITING = "waiting"
    CHECKING = "checking"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class MatchCheckRequest:
    match_id: UUID
    challenger_handle: str
    opponent_handle: str
    platform: Platform
    match_started_at: datetime
    time_control: TimeControl | str | None = None

    @classmethod
    def from_match(cls, match: OngoingMatch) -> MatchCheckRequest:
        return cls(
            match_id=match.id,
            challenger_handle=match.challenger_handle,
            opponent_handle=match.opponent_handle,
            platform=match.platform,
            match_started_at=match.match_started_at,
            time_control=match.time_control,
        )


@dataclass(eq=False, slots=True)
class CheckerEntry:
    request: MatchCheckRequest
    check_count: int = 0
    state: CheckState = CheckState.WAITING
    next_fire_at: datetime | None = None
    task: asyncio.Task[None] | None = field(default=None, repr=False)

    @property
    def match_id(self) -> UUID:
        return self.request.match_id

    @property
    def is_live(self) -> bool:
        return self.task is not None and not self.task.done()


@dataclass(frozen=True, slots=True)
class CheckerEntryStatus:
    match_id: UUID
    state: CheckState
    check_count: int
    remaining_checks: int
    next_fire_at: datetime | None


@dataclass(frozen=True, slots=True)
class CheckerStatus:
    active_checks: int
    entries: tuple[CheckerEntryStatus, ...] = ()


class PerMatchChecker:
    """Registry of live per-match checking tasks."""

    def __init__(  # noqa: PLR0913
        self,
        matcher: ResultMatcher,
        processor: MatchResultProcessor,
        store: MatchLifecycleStore,
        config: ReconciliationConfig | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = utcnow,
    ) -> None:
        self._matcher = matcher
        self._processor = processor
        self._store = store
        self._config = config or ReconciliationConfig()
        self._sleep = sleep
        self._clock = clock
        self._entries: dict[UUID, CheckerEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, match_id: object) -> bool:
        return match_id in self._entries

    def estimate_delay(self, time_control: TimeControl | str | None) -> int:
        default = int(self._config.default_match_duration.total_seconds())
        return estimate_match_duration(time_control, default_seconds=default)

    def start_checking_match(self, request: MatchCheckRequest) -> CheckerEntry:
        """Schedule checking for a match; must be called from within the event loop."""

        existing = self._entries.get(request.match_id)
        if existing is not None and existing.is_live:
            log.debug("Match %s is already being checked", request.match_id)
            return existing

        delay = self.estimate_delay(request.time_control)
        entry = CheckerEntry(
            request=request,
            next_fire_at=self._clock() + timedelta(seconds=delay),
        )
        entry.task = asyncio.get_running_loop().create_task(
            self._run(entry, delay), name=f"check-match-{request.match_id}"
        )
        self._entries[request.match_id] = entry
        log.info(
            "Checking match %s (%s vs %s on %s, %s) in %d seconds",
            request.match_id,
            request.challenger_handle,
            request.opponent_handle,
            request.platform,
            request.time_control or "no time control",
            delay,
        )
        return entry

    def stop_checking_match(self, match_id: UUID) -> bool:
        entry = self._entries.pop(match_id, None)
        if entry is None:
            return False
        entry.state = CheckState.STOPPED
        if entry.task is not None:
            entry.task.cancel()
        log.info("Stopped checking match %s after %d checks", match_id, entry.check_count)
        return True

    def manual_stop_check(self, match_id: UUID) -> bool:
        """Stop checking because a participant reported the result themselves."""

        stopped = self.stop_checking_match(match_id)
        if stopped:
            log.info("Match %s was reported manually", match_id)
        return stopped

    def status(self) -> CheckerStatus:
        limit = self._config.max_checks_per_match
        entries = tuple(
            CheckerEntryStatus(
                match_id=entry.match_id,
                state=entry.state,
                check_count=entry.check_count,
                remaining_checks=max(limit - entry.check_count, 0),
                next_fire_at=entry.next_fire_at,
            )
            for entry in self._entries.values()
        )
        return CheckerStatus(active_checks=len(entries), entries=entries)

    def cleanup(self) -> None:
        """Cancel every pending check (shutdown)."""

        if self._entries:
            log.info("Cancelling %d pending match checks", len(self._entries))
        for match_id in list(self._entries):
            self.stop_checking_match(match_id)

    async def aclose(self) -> None:
        tasks = [entry.task for entry in self._entries.values() if entry.task is not None]
        self.cleanup()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _run(self, entry: CheckerEntry, initial_delay: float) -> None:
        limit = self._config.max_checks_per_match
        interval = self._config.check_interval
        try:
            await self._sleep(initial_delay)
            while True:
                if entry.check_count >= limit:
                    log.warning(
                        "Giving up on match %s after %d checks; the backup sweep takes over",
                        entry.match_id,
                        entry.check_count,
                    )
                    return
                if await self._check(entry):
                    return
                entry.check_count += 1
                entry.state = CheckState.WAITING
                entry.next_fire_at = self._clock() + interval
                await self._sleep(interval.total_seconds())
        finally:
            entry.state = CheckState.STOPPED
            if self._entries.get(entry.match_id) is entry:
                del self._entries[entry.match_id]

    async def _check(self, entry: CheckerEntry) -> bool:
        """Run one check; return True when nothing is left to do for the match."""

        request = entry.request
        attempt = entry.check_count + 1
        entry.state = CheckState.CHECKING
        entry.next_fire_at = None
        try:
            match = self._store.get_match(request.match_id)
            if match.result_checked:
                log.info("Match %s already settled; stopping", request.match_id)
                return True
            # Adapters bound their own requests and report timeouts as "no games".
            matched = await self._matcher.find_result(
                request.challenger_handle,
                request.opponent_handle,
                request.platform,
                request.match_started_at,
            )
            if matched is None:
                log.info(
                    "Check %d/%d for match %s on %s: no result yet",
                    attempt,
                    self._config.max_checks_per_match,
                    request.match_id,
                    request.platform,
                )
                return False
            outcome = self._processor.process(request.match_id, matched)
        except NotFoundError:
            log.warning("Match %s no longer exists; stopping", request.match_id)
            return True
        except Exception:
            log.exception(
                "Check %d for match %s on %s failed",
                attempt,
                request.match_id,
                request.platform,
            )
            return False

        log.info(
            "Match %s settled by check %d (%s, recorded=%s)",
            request.match_id,
            attempt,
            matched.outcome,
            outcome.recorded,
        )
        return True


__all__ = [
    "CheckState",
    "CheckerEntry",
    "CheckerEntryStatus",
    "CheckerStatus",
    "MatchCheckRequest",
    "PerMatchChecker",
    "Sleep",
]
