"""In-process event bus fanning topic events out to stream subscribers."""

import asyncio
import contextlib
import logging
import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .topics import KNOWN_TOPICS, parse_topics

logger = logging.getLogger(__name__)

HELLO_EVENT = "hello"
TICK_EVENT = "tick"


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class SseMessage:
    """One named event for a subscriber's stream."""

    event: str
    data: Any


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


@dataclass(eq=False)
class Subscription:
    """A single open stream and the queue feeding it.

    The queue belongs to the event loop that opened the stream. Writers on
    other threads hand messages over with call_soon_threadsafe.
    """

    topics: tuple[str, ...]
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue[SseMessage | None]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: ConnectionState = ConnectionState.CONNECTING
    heartbeat: asyncio.Task[None] | None = None

    def wants(self, topic: str) -> bool:
        return self.state == ConnectionState.OPEN and topic in self.topics

    def deliver(self, message: SseMessage | None) -> bool:
        """Enqueue a message from any thread. Raises RuntimeError if the loop is closed.

        Returns False when the queue was full. Handoffs from other threads
        report True once scheduled.
        """
        if _running_loop() is self.loop:
            return self._put(message)
        self.loop.call_soon_threadsafe(self._put, message)
        return True

    def _put(self, message: SseMessage | None) -> bool:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(
                "Dropping '%s' for subscriber %s: queue full",
                message.event if message else "close",
                self.id,
            )
            return False
        return True

    async def next_message(self) -> SseMessage | None:
        """Next queued message, or None once the subscription is closed."""
        if self.state == ConnectionState.CLOSED and self.queue.empty():
            return None
        return await self.queue.get()


class EventBus:
    """Topic-filtered broadcast to every open subscription.

    emit() may be called from request worker threads; connect() and the
    heartbeats run on the event loop. The registry is guarded by a lock.
    """

    def __init__(self, heartbeat_interval: float = 5.0, max_queue_size: int = 1000):
        self.heartbeat_interval = heartbeat_interval
        self.max_queue_size = max_queue_size
        self._connections: dict[str, Subscription] = {}
        self._lock = threading.Lock()

    @property
    def connection_count(self) -> int:
        with self._lock:
            return len(self._connections)

    async def connect(self, topics_param: str | None = None) -> Subscription:
        """Open a subscription, send the hello event, and start its heartbeat."""
        loop = asyncio.get_running_loop()
        subscription = Subscription(
            topics=parse_topics(topics_param),
            loop=loop,
            queue=asyncio.Queue(maxsize=self.max_queue_size),
        )
        with self._lock:
            self._connections[subscription.id] = subscription
        subscription.state = ConnectionState.OPEN

        subscription.deliver(
            SseMessage(
                HELLO_EVENT,
                {"ok": True, "id": subscription.id, "topics": list(subscription.topics)},
            )
        )
        subscription.heartbeat = loop.create_task(self._heartbeat_loop(subscription))

        logger.info(
            "Subscriber %s connected to %s",
            subscription.id,
            ",".join(subscription.topics),
        )
        return subscription

    def emit(self, topic: str, payload: Any) -> int:
        """Deliver ``payload`` to every open subscription on ``topic``.

        Unknown topics are ignored. A subscriber that cannot accept the
        message is logged and skipped. Returns the delivery count.
        """
        if topic not in KNOWN_TOPICS:
            logger.debug("Ignoring emit on unknown topic '%s'", topic)
            return 0

        with self._lock:
            targets = [s for s in self._connections.values() if s.wants(topic)]

        message = SseMessage(topic, payload)
        delivered = 0
        for subscription in targets:
            try:
                accepted = subscription.deliver(message)
            except RuntimeError as e:
                logger.warning(
                    "Failed to deliver '%s' to subscriber %s: %s",
                    topic,
                    subscription.id,
                    e,
                    extra={"topic": topic},
                )
                continue
            if accepted:
                delivered += 1
        return delivered

    def disconnect(self, subscription: Subscription) -> None:
        """Remove a subscription and stop its heartbeat. Safe to call twice."""
        with self._lock:
            removed = self._connections.pop(subscription.id, None)
        if subscription.state == ConnectionState.CLOSED:
            return

        subscription.state = ConnectionState.CLOSED
        if subscription.heartbeat is not None and not subscription.heartbeat.done():
            if _running_loop() is subscription.loop:
                subscription.heartbeat.cancel()
            else:
                with contextlib.suppress(RuntimeError):
                    subscription.loop.call_soon_threadsafe(subscription.heartbeat.cancel)
        # Wake a stream blocked on the queue so it can finish.
        with contextlib.suppress(RuntimeError):
            subscription.deliver(None)

        if removed is not None:
            logger.info("Subscriber %s disconnected", subscription.id)

    def close_all(self) -> None:
        with self._lock:
            subscriptions = list(self._connections.values())
        for subscription in subscriptions:
            self.disconnect(subscription)

    async def _heartbeat_loop(self, subscription: Subscription) -> None:
        while subscription.state == ConnectionState.OPEN:
            await asyncio.sleep(self.heartbeat_interval)
            if subscription.state != ConnectionState.OPEN:
                break
            subscription.deliver(SseMessage(TICK_EVENT, {}))
