"""Rate limiting configuration using slowapi."""

import time
from collections import defaultdict

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from settings import get_settings

WINDOW_SECONDS = {"second": 1, "minute": 60, "hour": 3600, "day": 86400}


def get_api_key_or_ip(request: Request) -> str:
    """Rate limit by API key if present, otherwise by IP."""
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"key:{api_key}"
    return f"ip:{get_remote_address(request)}"


def bookings_limit() -> str:
    return get_settings().rate_limit.bookings


limiter = Limiter(key_func=get_api_key_or_ip)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """429 with a Retry-After header derived from the limit's window."""
    retry_after = str(exc.detail)
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if view_rate_limit:
        for unit, seconds in WINDOW_SECONDS.items():
            if unit in str(view_rate_limit):
                retry_after = str(seconds)
                break

    response = JSONResponse(status_code=429, content={"detail": f"Rate limit exceeded: {exc.detail}"})
    response.headers["retry-after"] = retry_after
    return response


class StreamConnectionLimiter:
    """Sliding-window cap on new event-stream connections per client."""

    def __init__(self, max_connections: int, window_seconds: int) -> None:
        self.max_connections = max_connections
        self.window_seconds = window_seconds
        self._attempts: dict[str, list[float]] = defaultdict(list)

    def is_limited(self, key: str) -> bool:
        now = time.time()
        cutoff = now - self.window_seconds
        self._attempts[key] = [t for t in self._attempts[key] if t > cutoff]
        if len(self._attempts[key]) >= self.max_connections:
            return True
        self._attempts[key].append(now)
        return False

    def reset(self) -> None:
        self._attempts.clear()
