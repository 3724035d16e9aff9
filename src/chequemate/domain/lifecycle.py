"""Challenge lifecycle graph.

``completed`` is an externally observed fact: it is only ever entered by recording a
match result, never by a command a user issues.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from chequemate.domain.errors import InvalidTransitionError
from chequemate.domain.model import ChallengeStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

ALLOWED_TRANSITIONS: Final[Mapping[ChallengeStatus, frozenset[ChallengeStatus]]] = {
    ChallengeStatus.PENDING: frozenset(
        {ChallengeStatus.ACCEPTED, ChallengeStatus.DECLINED, ChallengeStatus.CANCELLED}
    ),
    ChallengeStatus.ACCEPTED: frozenset(
        {ChallengeStatus.STARTED, ChallengeStatus.POSTPONED, ChallengeStatus.CANCELLED}
    ),
    ChallengeStatus.POSTPONED: frozenset({ChallengeStatus.ACCEPTED}),
    ChallengeStatus.STARTED: frozenset({ChallengeStatus.COMPLETED}),
    ChallengeStatus.DECLINED: frozenset(),
    ChallengeStatus.CANCELLED: frozenset(),
    ChallengeStatus.COMPLETED: frozenset(),
}

TERMINAL_STATUSES: Final[frozenset[ChallengeStatus]] = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)

# Statuses a user command may move a challenge into.
USER_TARGETS: Final[frozenset[ChallengeStatus]] = frozenset(
    {
        ChallengeStatus.ACCEPTED,
        ChallengeStatus.DECLINED,
        ChallengeStatus.CANCELLED,
        ChallengeStatus.POSTPONED,
    }
)


def can_transition(current: ChallengeStatus, requested: ChallengeStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: ChallengeStatus, requested: ChallengeStatus) -> None:
    if not can_transition(current, requested):
        raise InvalidTransitionError(current, requested)


def ensure_user_transition(current: ChallengeStatus, requested: ChallengeStatus) -> None:
    """Validate a user-issued command; completion and start are reserved for the system."""

    if requested not in USER_TARGETS:
        raise InvalidTransitionError(current, requested)
    ensure_transition(current, requested)


def is_terminal(status: ChallengeStatus) -> bool:
    return status in TERMINAL_STATUSES
