from __future__ import annotations

import asyncio
from uuid import uuid4

from chequemate.adapters.notifications import InProcessNotificationDispatcher, Notification
from chequemate.domain.ports import VICTORY_NOTIFICATION


def test_deliver_to_every_connection() -> None:
    async def scenario() -> None:
        dispatcher = InProcessNotificationDispatcher()
        user = uuid4()
        first = dispatcher.subscribe(user)
        second = dispatcher.subscribe(user)

        assert dispatcher.deliver(user, VICTORY_NOTIFICATION, {"opponent": "Hikaru"})

        expected = Notification(VICTORY_NOTIFICATION, {"opponent": "Hikaru"})
        assert first.get_nowait() == expected
        assert second.get_nowait() == expected

    asyncio.run(scenario())


def test_offline_users_miss_events() -> None:
    async def scenario() -> None:
        dispatcher = InProcessNotificationDispatcher()
        user = uuid4()
        queue = dispatcher.subscribe(user)
        dispatcher.unsubscribe(user, queue)

        assert not dispatcher.is_connected(user)
        assert not dispatcher.deliver(user, VICTORY_NOTIFICATION, {})
        assert queue.empty()

    asyncio.run(scenario())


def test_full_queue_drops_event() -> None:
    async def scenario() -> None:
        dispatcher = InProcessNotificationDispatcher(queue_size=1)
        user = uuid4()
        queue = dispatcher.subscribe(user)

        assert dispatcher.deliver(user, "first", {})
        assert not dispatcher.deliver(user, "second", {})
        assert queue.qsize() == 1
        assert queue.get_nowait().event_name == "first"

    asyncio.run(scenario())
