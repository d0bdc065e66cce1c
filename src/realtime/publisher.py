"""Publishes domain changes to the event bus without affecting the caller."""

import logging
from typing import Any

from pydantic_core import to_jsonable_python

from .bus import EventBus
from .topics import TOPIC_DRIVERS, TOPIC_RATES, TOPIC_RIDES

logger = logging.getLogger(__name__)


class EventPublisher:
    """Wraps each change as ``{event, data}`` and emits it on a topic.

    Failures are logged and swallowed: a broadcast problem never fails the
    store operation that triggered it.
    """

    def __init__(self, bus: EventBus | None = None):
        self.bus = bus

    def publish(self, topic: str, event: str, data: Any) -> int:
        if self.bus is None:
            return 0
        try:
            payload = {"event": event, "data": to_jsonable_python(data, by_alias=True)}
            return self.bus.emit(topic, payload)
        except Exception:
            logger.warning(
                "Failed to publish %s/%s", topic, event, exc_info=True, extra={"topic": topic}
            )
            return 0

    def ride_event(self, event: str, ride: Any) -> int:
        return self.publish(TOPIC_RIDES, event, ride)

    def driver_event(self, event: str, data: Any) -> int:
        return self.publish(TOPIC_DRIVERS, event, data)

    def rate_event(self, prefix: str, verb: str, data: Any) -> int:
        return self.publish(TOPIC_RATES, f"{prefix}_{verb}", data)
