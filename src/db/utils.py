from datetime import UTC, datetime
from enum import Enum
from typing import Any


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def column_values(values: dict[str, Any]) -> dict[str, Any]:
    """Unwrap enum members to their stored values."""
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}
