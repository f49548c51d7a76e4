"""
A simple, in-memory, async-friendly Event Bus.

The shutdown orchestrator publishes its lifecycle milestones here. Observers
may be plain functions or coroutine functions; a failing observer is logged
and never interrupts the publisher.
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Union

logger = logging.getLogger(__name__)

# Type hint for a callback that takes one argument, sync or async
EventCallback = Callable[[Any], Union[None, Awaitable[None]]]


class EventBus:
    """
    A simple event bus for pub/sub interactions.
    """
    def __init__(self):
        self._subscribers: Dict[str, List[EventCallback]] = defaultdict(list)

    def subscribe(self, topic: str, callback: EventCallback) -> None:
        """
        Subscribes a callback to a specific topic.

        Args:
            topic: The topic to subscribe to (e.g., "ShutdownEnded").
            callback: Function called with the event payload when published.
        """
        logger.debug(f"New subscription to topic: {topic}")
        self._subscribers[topic].append(callback)

    def unsubscribe(self, topic: str, callback: EventCallback) -> bool:
        """Removes a callback. Returns False if it was not subscribed."""
        callbacks = self._subscribers.get(topic, [])
        if callback not in callbacks:
            return False
        callbacks.remove(callback)
        return True

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))

    async def publish(self, topic: str, data: Any = None) -> None:
        """
        Publishes an event to all subscribers of a topic.

        Sync callbacks run immediately in subscription order; async callbacks
        are then awaited together. Returns once every callback has finished.

        Args:
            topic: The topic to publish the event to.
            data: The data payload of the event.
        """
        callbacks = list(self._subscribers.get(topic, []))
        if not callbacks:
            return

        logger.debug(f"Publishing event to topic '{topic}' for {len(callbacks)} subscribers.")
        pending = []
        for callback in callbacks:
            try:
                result = callback(data)
            except Exception as e:
                logger.warning(f"Subscriber {callback!r} for '{topic}' failed: {e}")
                continue
            if inspect.isawaitable(result):
                pending.append(result)

        if pending:
            results = await asyncio.gather(*pending, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.warning(f"Async subscriber for '{topic}' failed: {result}")
