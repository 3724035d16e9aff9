"""Port for pushing events to connected users."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

VICTORY_NOTIFICATION: Final[str] = "victory-notification"


@runtime_checkable
class NotificationDispatcher(Protocol):
    """Best-effort, at-most-once delivery to a user if they are currently connected."""

    def deliver(self, user_id: UUID, event_name: str, payload: Mapping[str, Any]) -> bool:
        """Return whether the event was handed to a live connection."""
        ...
