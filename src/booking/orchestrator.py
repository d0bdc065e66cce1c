"""Turns a booking request into a priced, persisted ride."""

import logging

from core.exceptions import BookingError, DispatchError
from pricing.engine import FareEngine
from pricing.models import CalculationType, FareBreakdown, FareRequest
from rides.ride import RideCreate, RideType
from rides.state_store import StateStore

from .models import BookingRequest, BookingResult

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHOD = "cash"


def estimate_duration_minutes(request: BookingRequest, fare: FareBreakdown) -> int | None:
    """Rough trip duration in minutes.

    Hourly bookings use the requested hours. Otherwise two minutes per km of
    straight-line distance, which is a placeholder rather than a routed ETA.
    """
    if request.is_hourly and request.estimated_hours:
        return round(request.estimated_hours * 60)
    if fare.breakdown.distance is not None:
        return round(fare.breakdown.distance * 2)
    return None


class BookingService:
    """Prices a booking, then persists it as a pending ride.

    A pricing failure aborts before anything is written.
    """

    def __init__(self, fare_engine: FareEngine, store: StateStore):
        self.fare_engine = fare_engine
        self.store = store

    def estimate(self, request: FareRequest) -> FareBreakdown:
        return self.fare_engine.compute_fare(request)

    def create_booking(self, request: BookingRequest) -> BookingResult:
        try:
            fare = self.fare_engine.compute_fare(request.fare_request())
        except DispatchError as e:
            logger.warning(
                "Booking rejected for customer %s: %s",
                request.customer_id,
                e.message,
                extra={"customer_id": request.customer_id},
            )
            raise BookingError(e) from e

        ride = self.store.create_ride(self._ride_from(request, fare))
        return BookingResult(booking=ride, fare_breakdown=fare)

    def _ride_from(self, request: BookingRequest, fare: FareBreakdown) -> RideCreate:
        distance = fare.breakdown.distance
        return RideCreate(
            customer_id=request.customer_id,
            pickup_location=request.pickup_location,
            dropoff_location=request.dropoff_location,
            pickup_coords=request.pickup,
            dropoff_coords=request.dropoff,
            vehicle_type=request.vehicle_type,
            fare=str(fare.total_fare),
            base_fare=str(fare.base_fare),
            distance=str(distance) if distance is not None else None,
            is_scheduled=request.scheduled_time is not None,
            scheduled_time=request.scheduled_time,
            payment_method=request.payment_method or DEFAULT_PAYMENT_METHOD,
            ride_type=(
                RideType.BUSINESS
                if fare.calculation_type == CalculationType.HOURLY
                else RideType.STANDARD
            ),
            estimated_duration=estimate_duration_minutes(request, fare),
        )
