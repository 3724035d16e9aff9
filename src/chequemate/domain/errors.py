"""Domain-level errors surfaced by the lifecycle store and user actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from chequemate.domain.model import ChallengeStatus


class NotFoundError(LookupError):
    """Raised when a challenge or match id is unknown to the store."""

    def __init__(self, kind: str, entity_id: UUID) -> None:
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class ValidationError(ValueError):
    """Raised when a request is malformed (for example a self-challenge)."""


class InvalidTransitionError(ValidationError):
    """Raised when a challenge status change is not allowed by the lifecycle."""

    def __init__(self, current: ChallengeStatus, requested: ChallengeStatus | str) -> None:
        super().__init__(f"cannot move challenge from {current} to {requested}")
        self.current = current
        self.requested = requested
