from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from chequemate.domain.model import (
    ChallengeStatus,
    NormalizedGame,
    Platform,
    TimeControl,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from chequemate.domain.lifecycle_store import MatchLifecycleStore
    from chequemate.domain.model import OngoingMatch

REFERENCE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime = REFERENCE_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that records delays and moves a fake clock."""

    def __init__(self, clock: FakeClock | None = None) -> None:
        self.delays: list[float] = []
        self._clock = clock

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self._clock is not None:
            self._clock.advance(seconds)
        await asyncio.sleep(0)


class GatedSleep:
    """Sleep that blocks until the test releases it."""

    def __init__(self) -> None:
        self.delays: list[float] = []
        self.entered = asyncio.Event()
        self._gate = asyncio.Event()

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        self.entered.set()
        await self._gate.wait()

    def release(self) -> None:
        self._gate.set()


class FakeGameHistory:
    """Scripted game history; each call pops the next response."""

    def __init__(self, responses: Sequence[Sequence[NormalizedGame] | Exception] = ()) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[str, Platform]] = []

    async def fetch_recent_games(
        self, handle: str, platform: Platform
    ) -> Sequence[NormalizedGame]:
        self.calls.append((handle, platform))
        if not self._responses:
            return ()
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class RecordingDispatcher:
    def __init__(self, *, fail: bool = False) -> None:
        self.deliveries: list[tuple[UUID, str, dict[str, Any]]] = []
        self._fail = fail

    def deliver(self, user_id: UUID, event_name: str, payload: Mapping[str, Any]) -> bool:
        self.deliveries.append((user_id, event_name, dict(payload)))
        if self._fail:
            raise RuntimeError("socket closed")
        return True


def make_game(  # noqa: PLR0913
    white: str,
    black: str,
    *,
    ended_at: datetime,
    white_result: str = "win",
    black_result: str = "checkmated",
    platform: Platform = Platform.CHESS_COM,
    game_id: str | None = None,
) -> NormalizedGame:
    identifier = game_id or uuid4().hex[:8]
    return NormalizedGame(
        platform=platform,
        game_id=identifier,
        white_handle=white,
        black_handle=black,
        white_result=white_result,
        black_result=black_result,
        ended_at=ended_at,
        url=f"https://example.test/game/{identifier}",
        time_control="5+3",
        white_rating=1500,
        black_rating=1480,
        end_reason=black_result if white_result == "win" else white_result,
    )


def create_ready_match(  # noqa: PLR0913
    store: MatchLifecycleStore,
    *,
    challenger: str = "Magnus",
    opponent: str = "Hikaru",
    platform: Platform = Platform.CHESS_COM,
    time_control: str | None = "5+3",
    challenger_id: UUID | None = None,
    opponent_id: UUID | None = None,
) -> OngoingMatch:
    challenger_id = challenger_id or uuid4()
    opponent_id = opponent_id or uuid4()
    challenge = store.create_challenge(
        challenger_id,
        opponent_id,
        platform,
        TimeControl.try_parse(time_control),
        challenger_handle=challenger,
        opponent_handle=opponent,
    )
    store.transition_challenge(challenge.id, ChallengeStatus.ACCEPTED)
    store.record_redirection(challenge.id, challenger_id, is_challenger=True)
    outcome = store.record_redirection(challenge.id, opponent_id, is_challenger=False)
    assert outcome.newly_ready
    return outcome.match
