from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from chequemate.domain.challenges import ChallengeActions
from chequemate.domain.errors import InvalidTransitionError, ValidationError
from chequemate.domain.model import ChallengeStatus, Platform, TimeControl

if TYPE_CHECKING:
    from chequemate.domain.lifecycle_store import MatchLifecycleStore
    from chequemate.domain.model import Challenge


@pytest.fixture
def actions(store: MatchLifecycleStore) -> ChallengeActions:
    return ChallengeActions(store)


def _issue(actions: ChallengeActions, time_control: str | None = "10+0") -> Challenge:
    return actions.issue(
        challenger_id=uuid4(),
        challenger_handle="Magnus",
        opponent_id=uuid4(),
        opponent_handle="Hikaru",
        platform=Platform.LICHESS,
        time_control=time_control,
    )


def test_issue_parses_time_control(actions: ChallengeActions) -> None:
    challenge = _issue(actions, "3+2")

    assert challenge.status is ChallengeStatus.PENDING
    assert challenge.time_control == TimeControl(minutes=3, increment=2)


def test_issue_rejects_unparseable_time_control(actions: ChallengeActions) -> None:
    with pytest.raises(ValidationError):
        _issue(actions, "blitz")


def test_issue_without_time_control(actions: ChallengeActions) -> None:
    assert _issue(actions, None).time_control is None


def test_only_opponent_may_accept(
    actions: ChallengeActions, store: MatchLifecycleStore
) -> None:
    challenge = _issue(actions)

    with pytest.raises(ValidationError):
        actions.accept(challenge.id, challenge.challenger_id)
    assert store.get_challenge(challenge.id).status is ChallengeStatus.PENDING

    accepted = actions.accept(challenge.id, challenge.opponent_id)
    assert accepted.status is ChallengeStatus.ACCEPTED


def test_decline_is_terminal(actions: ChallengeActions) -> None:
    challenge = _issue(actions)
    actions.decline(challenge.id, challenge.opponent_id)

    with pytest.raises(InvalidTransitionError):
        actions.accept(challenge.id, challenge.opponent_id)


def test_postpone_and_resume_by_either_participant(
    actions: ChallengeActions, store: MatchLifecycleStore
) -> None:
    challenge = _issue(actions)
    actions.accept(challenge.id, challenge.opponent_id)

    actions.postpone(challenge.id, challenge.challenger_id)
    assert store.get_challenge(challenge.id).status is ChallengeStatus.POSTPONED

    resumed = actions.resume(challenge.id, challenge.opponent_id)
    assert resumed.status is ChallengeStatus.ACCEPTED


def test_postpone_requires_accepted_challenge(actions: ChallengeActions) -> None:
    challenge = _issue(actions)

    with pytest.raises(InvalidTransitionError) as excinfo:
        actions.postpone(challenge.id, challenge.challenger_id)

    assert excinfo.value.current is ChallengeStatus.PENDING
    assert excinfo.value.requested is ChallengeStatus.POSTPONED


def test_strangers_cannot_cancel(actions: ChallengeActions) -> None:
    challenge = _issue(actions)

    with pytest.raises(ValidationError):
        actions.cancel(challenge.id, uuid4())

    assert actions.cancel(challenge.id, challenge.challenger_id).status is (
        ChallengeStatus.CANCELLED
    )
