"""Server-sent events framing and the per-subscription stream."""

import json
from collections.abc import AsyncIterator

from .bus import EventBus, SseMessage, Subscription


def format_event(message: SseMessage) -> str:
    """Frame one message as ``event: <name>\\ndata: <json>\\n\\n``."""
    data = json.dumps(message.data, separators=(",", ":"), default=str)
    return f"event: {message.event}\ndata: {data}\n\n"


async def event_stream(bus: EventBus, subscription: Subscription) -> AsyncIterator[str]:
    """Yield framed events until the subscription closes.

    Client disconnects cancel the generator; either way the subscription is
    removed from the bus.
    """
    try:
        while True:
            message = await subscription.next_message()
            if message is None:
                break
            yield format_event(message)
    finally:
        bus.disconnect(subscription)
