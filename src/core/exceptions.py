"""Exception hierarchy for the dispatch core."""

from typing import Any


class DispatchError(Exception):
    """Base exception for all dispatch errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(DispatchError):
    """Invalid input or data format."""

    pass


class InvalidFareRequestError(ValidationError):
    """Fare request does not select any pricing mode."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "invalid booking request: missing required location or route information"
        )


class NotFoundError(DispatchError):
    """Requested entity does not exist."""

    pass


class RuleMissingError(NotFoundError):
    """No active rate rule matches the request, so it cannot be priced."""

    def __init__(self, kind: str, key: Any, message: str):
        super().__init__(message, details={"kind": kind, "key": key})
        self.kind = kind
        self.key = key


class RideStateError(DispatchError):
    """Transition is not allowed from the ride's current status."""

    def __init__(self, ride_id: int, action: str, status: str, message: str | None = None):
        super().__init__(
            message or f"Cannot {action} ride {ride_id} in status '{status}'",
            details={"ride_id": ride_id, "action": action, "status": status},
        )
        self.ride_id = ride_id
        self.action = action
        self.status = status


class ConflictError(DispatchError):
    """Write would duplicate a record that must be unique."""

    pass


class BookingError(DispatchError):
    """Booking could not be created. Wraps the underlying cause."""

    def __init__(self, cause: Exception):
        reason = getattr(cause, "message", None) or str(cause)
        super().__init__(f"booking failed: {reason}")
        self.cause = cause


class ConfigurationError(DispatchError):
    """Missing or invalid configuration."""

    pass
