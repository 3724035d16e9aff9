"""In-process notification dispatch to connected users."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from chequemate.domain.ports.notifications import NotificationDispatcher

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Notification:
    event_name: str
    payload: Mapping[str, Any] = field(default_factory=dict)


class InProcessNotificationDispatcher:
    """Fan events out to the queues of a user's live connections.

    Users with no subscribed connection miss the event; nothing is stored for later.
    """

    def __init__(self, *, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._subscribers: defaultdict[UUID, list[asyncio.Queue[Notification]]] = defaultdict(
            list
        )

    def subscribe(self, user_id: UUID) -> asyncio.Queue[Notification]:
        queue: asyncio.Queue[Notification] = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers[user_id].append(queue)
        log.debug("User %s connected (%d connections)", user_id, len(self._subscribers[user_id]))
        return queue

    def unsubscribe(self, user_id: UUID, queue: asyncio.Queue[Notification]) -> None:
        queues = self._subscribers.get(user_id)
        if not queues or queue not in queues:
            return
        queues.remove(queue)
        if not queues:
            del self._subscribers[user_id]

    def is_connected(self, user_id: UUID) -> bool:
        return bool(self._subscribers.get(user_id))

    def deliver(self, user_id: UUID, event_name: str, payload: Mapping[str, Any]) -> bool:
        queues = self._subscribers.get(user_id)
        if not queues:
            log.info("User %s is not connected; dropping %s", user_id, event_name)
            return False
        notification = Notification(event_name=event_name, payload=dict(payload))
        delivered = False
        for queue in queues:
            try:
                queue.put_nowait(notification)
            except asyncio.QueueFull:
                log.warning("Notification queue full for user %s; dropping %s", user_id, event_name)
                continue
            delivered = True
        return delivered


if TYPE_CHECKING:
    _dispatcher_check: NotificationDispatcher = InProcessNotificationDispatcher()
