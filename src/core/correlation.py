"""Correlation context for request tracing."""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

current_correlation_id: ContextVar[str | None] = ContextVar(
    "correlation_id", default=None
)

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationFilter(logging.Filter):
    """Logging filter that adds the request correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = current_correlation_id.get() or "-"
        return True


def new_correlation_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def with_correlation(correlation_id: str) -> Iterator[None]:
    """Context manager to set correlation ID for a block of code.

    Usage:
        with with_correlation(request_id):
            logger.info("Assigning ride")  # Will include correlation_id in log
    """
    token = current_correlation_id.set(correlation_id)
    try:
        yield
    finally:
        current_correlation_id.reset(token)


def get_current_correlation_id() -> str | None:
    """Get the current correlation ID from context."""
    return current_correlation_id.get()
