"""Context-local logging fields for ride and driver operations."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any] | None] = ContextVar("log_context", default=None)


class LogContext:
    """Context-local storage for log context fields.

    Backed by a ContextVar so each request handled in the threadpool or on
    the event loop sees only its own fields.
    """

    @classmethod
    def set(cls, **kwargs: Any) -> None:
        ctx = dict(_log_context.get() or {})
        ctx.update(kwargs)
        _log_context.set(ctx)

    @classmethod
    def get(cls) -> dict[str, Any]:
        return _log_context.get() or {}

    @classmethod
    def clear(cls) -> None:
        _log_context.set(None)


class ContextFilter(logging.Filter):
    """Injects LogContext fields into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in LogContext.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Context manager that sets logging context fields.

    Fields are injected into log records via ContextFilter, which must
    be attached to the handler (see setup_logging).
    """
    token = _log_context.set({**LogContext.get(), **kwargs})
    try:
        yield
    finally:
        _log_context.reset(token)


@contextmanager
def log_ride_context(ride_id: int, **kwargs: Any) -> Iterator[None]:
    """Convenience context manager for ride operations."""
    with log_context(ride_id=ride_id, **kwargs):
        yield
