"""Logging setup and configuration."""

import logging
import sys

from core.correlation import CorrelationFilter

from .context import ContextFilter
from .filters import DefaultCorrelationFilter, PIIFilter
from .formatters import DevFormatter, JSONFormatter


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    environment: str = "development",
) -> None:
    """Configure the root logger with appropriate formatter and filters."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)

    if json_output:
        handler.setFormatter(JSONFormatter(environment))
    else:
        handler.setFormatter(DevFormatter())

    handler.addFilter(PIIFilter())
    handler.addFilter(CorrelationFilter())
    handler.addFilter(DefaultCorrelationFilter())
    handler.addFilter(ContextFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)
