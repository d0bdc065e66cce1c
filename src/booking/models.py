"""Booking request and result models."""

from datetime import datetime

from pydantic import Field

from pricing.models import CamelModel, FareBreakdown, FareRequest
from rides.ride import Ride


class BookingRequest(FareRequest):
    """Everything a customer submits to book a ride."""

    customer_id: int
    pickup_location: str = Field(min_length=1)
    dropoff_location: str = Field(min_length=1)
    scheduled_time: datetime | None = None
    payment_method: str | None = None

    def fare_request(self) -> FareRequest:
        return FareRequest.model_validate(
            self.model_dump(include=set(FareRequest.model_fields))
        )


class BookingResult(CamelModel):
    booking: Ride
    fare_breakdown: FareBreakdown
    message: str = "Booking created successfully"
