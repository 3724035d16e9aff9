"""Challenges issued between two users."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chequemate.domain.model.base import Entity, utcnow
from chequemate.domain.model.enums import ChallengeStatus, Platform

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from chequemate.domain.model.time_control import TimeControl

DEFAULT_RULES = "chess"


@dataclass(eq=False, kw_only=True)
class Challenge(Entity):
    """A proposed match between two users on one external platform."""

    challenger_id: UUID
    opponent_id: UUID
    challenger_handle: str
    opponent_handle: str
    platform: Platform
    time_control: TimeControl | None = None
    rules: str = DEFAULT_RULES
    status: ChallengeStatus = ChallengeStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.challenger_id == self.opponent_id:
            raise ValueError("challenger and opponent must be different users")
        if self.challenger_handle.casefold() == self.opponent_handle.casefold():
            raise ValueError("challenger and opponent must use different platform handles")

    def participant_ids(self) -> tuple[UUID, UUID]:
        return self.challenger_id, self.opponent_id

    def involves(self, user_id: UUID) -> bool:
        return user_id in (self.challenger_id, self.opponent_id)
