"""User-issued commands on challenges."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from chequemate.domain.errors import ValidationError
from chequemate.domain.lifecycle import ensure_user_transition
from chequemate.domain.model import DEFAULT_RULES, ChallengeStatus, TimeControl

if TYPE_CHECKING:
    from uuid import UUID

    from chequemate.domain.lifecycle_store import MatchLifecycleStore
    from chequemate.domain.model import Challenge, Platform

log = getLogger(__name__)


class ChallengeActions:
    """Validate who may do what, then hand the change to the store.

    Only the opponent answers a pending challenge; either participant may cancel,
    postpone or resume one.
    """

    def __init__(self, store: MatchLifecycleStore) -> None:
        self._store = store

    def issue(  # noqa: PLR0913
        self,
        *,
        challenger_id: UUID,
        challenger_handle: str,
        opponent_id: UUID,
        opponent_handle: str,
        platform: Platform,
        time_control: TimeControl | str | None = None,
        rules: str = DEFAULT_RULES,
    ) -> Challenge:
        if isinstance(time_control, str):
            try:
                time_control = TimeControl.parse(time_control)
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
        return self._store.create_challenge(
            challenger_id,
            opponent_id,
            platform,
            time_control,
            rules,
            challenger_handle=challenger_handle,
            opponent_handle=opponent_handle,
        )

    def accept(self, challenge_id: UUID, user_id: UUID) -> Challenge:
        return self._answer(challenge_id, user_id, ChallengeStatus.ACCEPTED)

    def decline(self, challenge_id: UUID, user_id: UUID) -> Challenge:
        return self._answer(challenge_id, user_id, ChallengeStatus.DECLINED)

    def cancel(self, challenge_id: UUID, user_id: UUID) -> Challenge:
        return self._move(challenge_id, user_id, ChallengeStatus.CANCELLED)

    def postpone(self, challenge_id: UUID, user_id: UUID) -> Challenge:
        return self._move(challenge_id, user_id, ChallengeStatus.POSTPONED)

    def resume(self, challenge_id: UUID, user_id: UUID) -> Challenge:
        return self._move(challenge_id, user_id, ChallengeStatus.ACCEPTED)

    def _answer(self, challenge_id: UUID, user_id: UUID, target: ChallengeStatus) -> Challenge:
        challenge = self._store.get_challenge(challenge_id)
        if user_id != challenge.opponent_id:
            raise ValidationError(f"only the opponent may answer challenge {challenge_id}")
        ensure_user_transition(challenge.status, target)
        return self._store.transition_challenge(challenge_id, target)

    def _move(self, challenge_id: UUID, user_id: UUID, target: ChallengeStatus) -> Challenge:
        challenge = self._store.get_challenge(challenge_id)
        if not challenge.involves(user_id):
            raise ValidationError(f"user {user_id} is not part of challenge {challenge_id}")
        ensure_user_transition(challenge.status, target)
        return self._store.transition_challenge(challenge_id, target)
