"""Application composition root."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from chequemate.adapters.game_history import GameHistorySource
from chequemate.adapters.notifications import InProcessNotificationDispatcher
from chequemate.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMatchUnitOfWork,
    is_started,
    startup,
)
from chequemate.config import get_reconciliation_config
from chequemate.domain.challenges import ChallengeActions
from chequemate.domain.checking import (
    BackupSweepChecker,
    MatchCheckRequest,
    MatchResultProcessor,
    PerMatchChecker,
)
from chequemate.domain.lifecycle_store import MatchLifecycleStore
from chequemate.domain.matching import ResultMatcher
from chequemate.domain.model import utcnow
from chequemate.domain.ports.unit_of_work import MatchUnitOfWork

if TYPE_CHECKING:
    from uuid import UUID

    from chequemate.config import ReconciliationConfig
    from chequemate.domain.checking import CheckerStatus, ProcessingOutcome, SweepReport
    from chequemate.domain.checking.per_match import Sleep
    from chequemate.domain.lifecycle_store import RedirectionOutcome
    from chequemate.domain.ports import GameHistory, NotificationDispatcher
    from chequemate.domain.time_windows import Clock

UnitOfWorkFactory = Callable[[], MatchUnitOfWork]

log = getLogger(__name__)


class ReconciliationService:
    """Owns both checkers and wires user-driven events into them."""

    def __init__(  # noqa: PLR0913
        self,
        *,
        store: MatchLifecycleStore,
        actions: ChallengeActions,
        processor: MatchResultProcessor,
        per_match: PerMatchChecker,
        sweep: BackupSweepChecker,
        history: GameHistory,
    ) -> None:
        self.store = store
        self.actions = actions
        self.processor = processor
        self.per_match = per_match
        self.sweep = sweep
        self.history = history

    def start(self) -> None:
        """Start the backup sweep; call from within the running event loop."""

        self.sweep.start()
        log.info("Reconciliation service started")

    async def aclose(self) -> None:
        await self.per_match.aclose()
        await self.sweep.aclose()
        aclose = getattr(self.history, "aclose", None)
        if aclose is not None:
            await aclose()
        log.info("Reconciliation service stopped")

    def record_redirection(
        self,
        challenge_id: UUID,
        user_id: UUID,
        *,
        is_challenger: bool,
    ) -> RedirectionOutcome:
        """Record a redirection and start checking once both players have left."""

        outcome = self.store.record_redirection(
            challenge_id, user_id, is_challenger=is_challenger
        )
        if outcome.newly_ready:
            self.per_match.start_checking_match(MatchCheckRequest.from_match(outcome.match))
        return outcome

    def report_manually(
        self,
        match_id: UUID,
        winner_id: UUID | None,
        *,
        game_url: str | None = None,
    ) -> ProcessingOutcome:
        """Settle a match from a participant's report; ``winner_id=None`` reports a draw."""

        self.per_match.manual_stop_check(match_id)
        return self.processor.process_report(match_id, winner_id, game_url=game_url)

    def track_ready_matches(self) -> int:
        """Schedule per-match checks for every ready match not already tracked."""

        started = 0
        for match in self.store.find_ready_matches():
            if match.id in self.per_match:
                continue
            self.per_match.start_checking_match(MatchCheckRequest.from_match(match))
            started += 1
        return started

    async def sweep_once(self) -> SweepReport:
        return await self.sweep.sweep_once()

    def status(self) -> CheckerStatus:
        return self.per_match.status()


def build_reconciliation_service(  # noqa: PLR0913
    *,
    config: ReconciliationConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    history: GameHistory | None = None,
    dispatcher: NotificationDispatcher | None = None,
    sleep: Sleep = asyncio.sleep,
    clock: Clock = utcnow,
) -> ReconciliationService:
    """Assemble the service from configured adapters, substituting any given ports."""

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyMatchUnitOfWork

    effective_config = config or get_reconciliation_config()
    effective_history = history or GameHistorySource()
    store = MatchLifecycleStore(unit_of_work_factory, clock=clock)
    processor = MatchResultProcessor(store, dispatcher or InProcessNotificationDispatcher())
    matcher = ResultMatcher(
        effective_history, lookback=effective_config.match_lookback, clock=clock
    )
    log.debug("Building reconciliation service with %s", effective_config)
    return ReconciliationService(
        store=store,
        actions=ChallengeActions(store),
        processor=processor,
        per_match=PerMatchChecker(
            matcher, processor, store, effective_config, sleep=sleep, clock=clock
        ),
        sweep=BackupSweepChecker(
            store, matcher, processor, effective_config, clock=clock, sleep=sleep
        ),
        history=effective_history,
    )
