from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from api.auth import verify_stream_api_key
from api.dependencies import EventBusDep
from api.rate_limit import StreamConnectionLimiter
from realtime.sse import event_stream

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def get_stream_limiter(request: Request) -> StreamConnectionLimiter:
    return request.app.state.stream_limiter


@router.get("/events")
async def stream_events(
    bus: EventBusDep,
    limiter: Annotated[StreamConnectionLimiter, Depends(get_stream_limiter)],
    api_key: Annotated[str, Depends(verify_stream_api_key)],
    topics: str | None = None,
) -> StreamingResponse:
    """Open a server-sent event stream.

    ``topics`` is a comma-separated list; unknown names are ignored and an
    empty list subscribes to everything. The first event is ``hello``, then
    ``tick`` heartbeats and one event per published change.
    """
    if limiter.is_limited(f"key:{api_key}"):
        raise HTTPException(status_code=429, detail="Too many event stream connections")

    subscription = await bus.connect(topics)
    return StreamingResponse(
        event_stream(bus, subscription),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
