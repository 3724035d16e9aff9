"""Persistent state of challenges, tracked matches and their results.

Every write goes through a fresh unit of work. ``finalize_match`` is the only path
that records an outcome for a tracked match: it flips ``result_checked``, inserts the
``MatchResult`` and completes the challenge in one transaction, so whichever checker
writes second finds the flag already set and does nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from chequemate.domain.errors import InvalidTransitionError, NotFoundError, ValidationError
from chequemate.domain.lifecycle import can_transition
from chequemate.domain.model import (
    DEFAULT_RULES,
    Challenge,
    ChallengeStatus,
    MatchOutcome,
    MatchResult,
    OngoingMatch,
    utcnow,
)
from chequemate.domain.ports import DuplicateRecordError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime
    from uuid import UUID

    from chequemate.domain.model import Platform, TimeControl
    from chequemate.domain.ports import MatchRepositories, MatchUnitOfWork
    from chequemate.domain.time_windows import Clock

log = getLogger(__name__)

# Challenges a redirection may attach a tracked match to.
_REDIRECTABLE = frozenset({ChallengeStatus.ACCEPTED, ChallengeStatus.STARTED})


@dataclass(frozen=True, slots=True)
class RedirectionOutcome:
    match: OngoingMatch
    newly_ready: bool


class MatchLifecycleStore:
    """Facade over the repositories used by user actions and both checkers."""

    def __init__(
        self,
        unit_of_work_factory: Callable[[], MatchUnitOfWork],
        *,
        clock: Clock = utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._clock = clock

    # Challenges --------------------------------------------------------------

    def create_challenge(  # noqa: PLR0913
        self,
        challenger_id: UUID,
        opponent_id: UUID,
        platform: Platform,
        time_control: TimeControl | None = None,
        rules: str = DEFAULT_RULES,
        *,
        challenger_handle: str,
        opponent_handle: str,
    ) -> Challenge:
        if challenger_id == opponent_id:
            raise ValidationError("a user cannot challenge themselves")
        if challenger_handle.casefold() == opponent_handle.casefold():
            raise ValidationError("challenger and opponent share the same platform handle")

        challenge = Challenge(
            challenger_id=challenger_id,
            opponent_id=opponent_id,
            challenger_handle=challenger_handle,
            opponent_handle=opponent_handle,
            platform=platform,
            time_control=time_control,
            rules=rules,
            created_at=self._clock(),
        )
        with self._unit_of_work_factory() as uow:
            uow.repositories.challenges.add(challenge)
            uow.commit()
        log.info(
            "Created challenge %s: %s vs %s on %s (%s)",
            challenge.id,
            challenger_handle,
            opponent_handle,
            platform,
            time_control or "no time control",
        )
        return challenge

    def get_challenge(self, challenge_id: UUID) -> Challenge:
        with self._unit_of_work_factory() as uow:
            return self._require_challenge(uow.repositories, challenge_id)

    def transition_challenge(self, challenge_id: UUID, new_status: ChallengeStatus) -> Challenge:
        """Persist a status change; callers validate it against the lifecycle graph."""

        with self._unit_of_work_factory() as uow:
            challenge = self._require_challenge(uow.repositories, challenge_id)
            previous = challenge.status
            challenge.status = new_status
            challenge.updated_at = self._clock()
            uow.commit()
        log.info("Challenge %s moved from %s to %s", challenge_id, previous, new_status)
        return challenge

    def delete_postponed_challenge(self, challenge_id: UUID) -> None:
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            challenge = self._require_challenge(repositories, challenge_id)
            if challenge.status != ChallengeStatus.POSTPONED:
                raise InvalidTransitionError(challenge.status, "deleted")
            match = repositories.matches.get_by_challenge(challenge_id)
            if match is not None:
                repositories.matches.delete(match)
            repositories.challenges.delete(challenge)
            uow.commit()
        log.info("Deleted postponed challenge %s", challenge_id)

    # Tracked matches ---------------------------------------------------------

    def record_redirection(
        self,
        challenge_id: UUID,
        redirecting_user_id: UUID,
        *,
        is_challenger: bool,
    ) -> RedirectionOutcome:
        """Record that one participant left for the platform.

        The first redirection creates the tracked match. ``newly_ready`` is true for
        exactly one call: the one that completes the pair. That call also moves an
        accepted challenge to ``started``.
        """

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            challenge = self._require_challenge(repositories, challenge_id)
            expected = challenge.challenger_id if is_challenger else challenge.opponent_id
            if redirecting_user_id != expected:
                raise ValidationError(
                    f"user {redirecting_user_id} is not the "
                    f"{'challenger' if is_challenger else 'opponent'} of challenge {challenge_id}"
                )
            if challenge.status not in _REDIRECTABLE:
                raise ValidationError(
                    f"challenge {challenge_id} is {challenge.status}; only accepted "
                    "challenges can be played"
                )

            now = self._clock()
            match = repositories.matches.get_by_challenge(challenge_id)
            if match is None:
                match = OngoingMatch.for_challenge(challenge, started_at=now)
                repositories.matches.add(match)
            newly_ready = match.mark_redirected(is_challenger=is_challenger)
            if newly_ready and challenge.status == ChallengeStatus.ACCEPTED:
                challenge.status = ChallengeStatus.STARTED
                challenge.updated_at = now
            uow.commit()

        log.info(
            "Recorded %s redirection for challenge %s (match %s, ready=%s)",
            "challenger" if is_challenger else "opponent",
            challenge_id,
            match.id,
            match.both_redirected,
        )
        return RedirectionOutcome(match=match, newly_ready=newly_ready)

    def find_ready_matches(self) -> Sequence[OngoingMatch]:
        """Matches both players reached whose result has not been settled yet."""

        with self._unit_of_work_factory() as uow:
            return list(uow.repositories.matches.list_ready())

    def get_match(self, match_id: UUID) -> OngoingMatch:
        with self._unit_of_work_factory() as uow:
            match = uow.repositories.matches.get(match_id)
            if match is None:
                raise NotFoundError("match", match_id)
            return match

    def get_match_for_challenge(self, challenge_id: UUID) -> OngoingMatch | None:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.matches.get_by_challenge(challenge_id)

    def mark_result_checked(
        self,
        match_id: UUID,
        winner_id: UUID | None = None,
        result_label: MatchOutcome | str | None = None,
    ) -> bool:
        """Close out a match without a ``MatchResult``; ``None`` records it as unresolved.

        Returns whether this call performed the flip.
        """

        outcome = MatchOutcome(result_label) if result_label is not None else MatchOutcome.UNRESOLVED
        with self._unit_of_work_factory() as uow:
            if uow.repositories.matches.get(match_id) is None:
                raise NotFoundError("match", match_id)
            claimed = uow.repositories.matches.claim_result_check(
                match_id,
                outcome=outcome,
                winner_id=winner_id,
                evidence=None,
                completed_at=self._clock(),
            )
            uow.commit()
        if claimed:
            log.info("Marked match %s as checked with outcome %s", match_id, outcome)
        else:
            log.debug("Match %s was already checked", match_id)
        return claimed

    # Results -----------------------------------------------------------------

    def record_match_result(  # noqa: PLR0913
        self,
        challenge_id: UUID,
        winner_id: UUID | None,
        loser_id: UUID | None,
        result: MatchOutcome,
        platform: Platform,
        game_url: str | None,
        match_date: datetime | None,
    ) -> MatchResult | None:
        """Insert a result row; a second row for the same challenge is rejected with ``None``."""

        record = MatchResult(
            challenge_id=challenge_id,
            result=result,
            platform=platform,
            winner_id=winner_id,
            loser_id=loser_id,
            game_url=game_url,
            match_date=match_date,
            created_at=self._clock(),
        )
        with self._unit_of_work_factory() as uow:
            if uow.repositories.results.get_by_challenge(challenge_id) is not None:
                log.debug("Result for challenge %s already recorded", challenge_id)
                return None
            uow.repositories.results.add(record)
            try:
                uow.commit()
            except DuplicateRecordError:
                log.info("Concurrent result for challenge %s won the insert", challenge_id)
                return None
        return record

    def finalize_match(  # noqa: PLR0913
        self,
        match_id: UUID,
        *,
        winner_id: UUID | None,
        loser_id: UUID | None,
        outcome: MatchOutcome,
        game_url: str | None,
        match_date: datetime | None,
        evidence: dict[str, Any] | None = None,
    ) -> MatchResult | None:
        """Atomically settle a match; ``None`` means another writer already did."""

        now = self._clock()
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            match = repositories.matches.get(match_id)
            if match is None:
                raise NotFoundError("match", match_id)
            record = MatchResult(
                challenge_id=match.challenge_id,
                result=outcome,
                platform=match.platform,
                winner_id=winner_id,
                loser_id=loser_id,
                game_url=game_url,
                match_date=match_date,
                created_at=now,
            )
            claimed = repositories.matches.claim_result_check(
                match_id,
                outcome=outcome,
                winner_id=winner_id,
                evidence=evidence,
                completed_at=now,
            )
            if not claimed:
                uow.rollback()
                log.debug("Match %s already finalized; skipping", match_id)
                return None

            repositories.results.add(record)
            challenge = repositories.challenges.get(match.challenge_id)
            if challenge is not None and can_transition(
                challenge.status, ChallengeStatus.COMPLETED
            ):
                challenge.status = ChallengeStatus.COMPLETED
                challenge.updated_at = now
            elif challenge is not None:
                log.warning(
                    "Challenge %s is %s; leaving status unchanged after recording its result",
                    challenge.id,
                    challenge.status,
                )
            try:
                uow.commit()
            except DuplicateRecordError:
                log.info("Result for match %s was recorded concurrently", match_id)
                return None

        log.info(
            "Finalized match %s on %s: %s (winner=%s, game=%s)",
            match_id,
            record.platform,
            outcome,
            winner_id,
            game_url,
        )
        return record

    @staticmethod
    def _require_challenge(repositories: MatchRepositories, challenge_id: UUID) -> Challenge:
        challenge = repositories.challenges.get(challenge_id)
        if challenge is None:
            raise NotFoundError("challenge", challenge_id)
        return challenge


__all__ = ["MatchLifecycleStore", "RedirectionOutcome"]
