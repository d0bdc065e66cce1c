"""Real-time event fan-out over server-sent events."""

from .bus import ConnectionState, EventBus, SseMessage, Subscription
from .publisher import EventPublisher
from .sse import event_stream, format_event
from .topics import ALL_TOPICS, parse_topics

__all__ = [
    "ALL_TOPICS",
    "ConnectionState",
    "EventBus",
    "EventPublisher",
    "SseMessage",
    "Subscription",
    "event_stream",
    "format_event",
    "parse_topics",
]
