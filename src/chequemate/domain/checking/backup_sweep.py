"""Periodic safety net that re-scans every ready, unsettled match."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from chequemate.config import ReconciliationConfig
from chequemate.domain.model import estimate_match_duration, utcnow
from chequemate.domain.time_windows import elapsed_since

if TYPE_CHECKING:
    from chequemate.domain.checking.per_match import Sleep
    from chequemate.domain.checking.processing import MatchResultProcessor
    from chequemate.domain.lifecycle_store import MatchLifecycleStore
    from chequemate.domain.matching import ResultMatcher
    from chequemate.domain.model import OngoingMatch
    from chequemate.domain.time_windows import Clock

log = getLogger(__name__)


@dataclass(slots=True)
class SweepReport:
    examined: int = 0
    too_young: int = 0
    resolved: int = 0
    already_settled: int = 0
    pending: int = 0
    gave_up: int = 0
    failed: int = 0


class BackupSweepChecker:
    """Catch matches the per-match checker missed (restarts, exhausted retries)."""

    def __init__(  # noqa: PLR0913
        self,
        store: MatchLifecycleStore,
        matcher: ResultMatcher,
        processor: MatchResultProcessor,
        config: ReconciliationConfig | None = None,
        *,
        clock: Clock = utcnow,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._store = store
        self._matcher = matcher
        self._processor = processor
        self._config = config or ReconciliationConfig()
        self._clock = clock
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep_once(self) -> SweepReport:
        report = SweepReport()
        matches = self._store.find_ready_matches()
        log.info("Backup sweep found %d ready matches", len(matches))
        for match in matches:
            report.examined += 1
            age = elapsed_since(match.match_started_at, clock=self._clock)
            if age < self._config.sweep_min_age:
                report.too_young += 1
                log.debug(
                    "Match %s is only %.1f minutes old; leaving it to the per-match checker",
                    match.id,
                    age.total_seconds() / 60,
                )
                continue
            try:
                await self._sweep_match(match, age.total_seconds(), report)
            except Exception:
                report.failed += 1
                log.exception("Backup sweep failed for match %s on %s", match.id, match.platform)
        log.info("Backup sweep finished: %s", report)
        return report

    def give_up_after(self, match: OngoingMatch) -> timedelta:
        """Age past which an unfound match is closed as unresolved.

        Never earlier than the per-match checker's own schedule for the match, so
        long time controls are not given up on while the game is still running.
        """

        config = self._config
        default = int(config.default_match_duration.total_seconds())
        scheduled = timedelta(
            seconds=estimate_match_duration(match.time_control, default_seconds=default)
        )
        scheduled += config.check_interval * config.max_checks_per_match
        return max(config.give_up_after, scheduled)

    async def _sweep_match(self, match: OngoingMatch, age_seconds: float, report: SweepReport) -> None:
        matched = await self._matcher.find_result(
            match.challenger_handle,
            match.opponent_handle,
            match.platform,
            match.match_started_at,
        )
        if matched is not None:
            outcome = self._processor.process(match.id, matched)
            if outcome.recorded:
                report.resolved += 1
            else:
                report.already_settled += 1
            return

        if age_seconds > self.give_up_after(match).total_seconds():
            if self._store.mark_result_checked(match.id):
                report.gave_up += 1
                log.warning(
                    "No game found for match %s on %s after %.0f minutes; marked unresolved",
                    match.id,
                    match.platform,
                    age_seconds / 60,
                )
            else:
                report.already_settled += 1
            return

        report.pending += 1

    async def run_forever(self) -> None:
        interval = self._config.sweep_interval.total_seconds()
        log.info("Backup sweep running every %.0f seconds", interval)
        while True:
            await self._sleep(interval)
            try:
                await self.sweep_once()
            except Exception:
                log.exception("Backup sweep iteration failed")

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(
                self.run_forever(), name="backup-sweep"
            )
        return self._task

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()

    async def aclose(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


__all__ = ["BackupSweepChecker", "SweepReport"]
