"""In-process fan-out of newly stored messages, keyed by thread-affiliation key."""

import asyncio
import logging
from collections import defaultdict
from typing import Any

logger = logging.getLogger(__name__)


class Subscription:
    """A single listener on one thread key."""

    def __init__(self, thread_key: str, max_queue: int):
        self.thread_key = thread_key
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=max_queue)

    async def get(self) -> dict[str, Any]:
        return await self.queue.get()


class MessageRelay:
    """
    Publish/subscribe relay for live message delivery.

    Delivery is at-most-once: a subscriber whose queue is full misses the
    message, and nothing is replayed on (re)subscribe. Publish only after the
    message has been written to the store.
    """

    def __init__(self, max_queue: int = 100):
        self.max_queue = max_queue
        self._subscribers: dict[str, set[Subscription]] = defaultdict(set)

    def subscribe(self, thread_key: str) -> Subscription:
        subscription = Subscription(thread_key, self.max_queue)
        self._subscribers[thread_key].add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        listeners = self._subscribers.get(subscription.thread_key)
        if not listeners:
            return
        listeners.discard(subscription)
        if not listeners:
            del self._subscribers[subscription.thread_key]

    def subscriber_count(self, thread_key: str) -> int:
        return len(self._subscribers.get(thread_key, ()))

    def publish(self, message: dict[str, Any]) -> int:
        """Deliver ``message`` to subscribers of its threadId. Returns the delivery count."""
        thread_key = message.get("threadId")
        delivered = 0
        for subscription in list(self._subscribers.get(thread_key, ())):
            try:
                subscription.queue.put_nowait(message)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("Dropping message %s for slow subscriber on %s", message.get("id"), thread_key)
        return delivered
