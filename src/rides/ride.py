"""Ride state machine and models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from geo.distance import Coordinate
from pricing.models import VehicleType


class RideStatus(str, Enum):
    """Ride lifecycle states."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED})


class RideAction(str, Enum):
    """Named transitions. The value doubles as the emitted event name."""

    ASSIGN = "assigned"
    UNASSIGN = "unassigned"
    CANCEL = "cancelled"
    COMPLETE = "completed"
    TRANSFER = "transferred"

    @property
    def verb(self) -> str:
        return self.name.lower()


# Statuses each action may start from, and the status it lands in.
VALID_TRANSITIONS: dict[RideAction, tuple[frozenset[RideStatus], RideStatus]] = {
    RideAction.ASSIGN: (frozenset({RideStatus.PENDING}), RideStatus.ASSIGNED),
    RideAction.UNASSIGN: (frozenset({RideStatus.ASSIGNED}), RideStatus.PENDING),
    RideAction.CANCEL: (
        frozenset({RideStatus.PENDING, RideStatus.ASSIGNED}),
        RideStatus.CANCELLED,
    ),
    RideAction.COMPLETE: (frozenset({RideStatus.ASSIGNED}), RideStatus.COMPLETED),
    RideAction.TRANSFER: (frozenset({RideStatus.ASSIGNED}), RideStatus.ASSIGNED),
}


def can_transition(status: RideStatus, action: RideAction) -> bool:
    sources, _ = VALID_TRANSITIONS[action]
    return status in sources


class RideType(str, Enum):
    STANDARD = "standard"
    BUSINESS = "business"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class RideCreate(CamelModel):
    """Fields needed to persist a new ride. Status is always pending."""

    customer_id: int
    pickup_location: str
    dropoff_location: str
    pickup_coords: Coordinate | None = None
    dropoff_coords: Coordinate | None = None
    vehicle_type: VehicleType
    fare: str
    base_fare: str
    distance: str | None = None
    is_scheduled: bool = False
    scheduled_time: datetime | None = None
    payment_method: str = "cash"
    ride_type: RideType = RideType.STANDARD
    estimated_duration: int | None = None


class Ride(CamelModel):
    """Persisted ride. Fare amounts are decimal strings."""

    id: int
    customer_id: int
    driver_id: int | None = None
    pickup_location: str
    dropoff_location: str
    pickup_coords: Coordinate | None = None
    dropoff_coords: Coordinate | None = None
    vehicle_type: VehicleType
    fare: str
    base_fare: str
    distance: str | None = None
    status: RideStatus = Field(default=RideStatus.PENDING)
    request_time: datetime
    start_time: datetime | None = None
    end_time: datetime | None = None
    cancellation_reason: str | None = None
    is_scheduled: bool = False
    scheduled_time: datetime | None = None
    payment_method: str = "cash"
    payment_status: str = "pending"
    ride_type: RideType = RideType.STANDARD
    estimated_duration: int | None = None
