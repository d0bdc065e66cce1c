from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Request

from api.dependencies import BookingServiceDep, RateCatalogDep
from api.rate_limit import bookings_limit, limiter
from booking.models import BookingRequest, BookingResult
from core.exceptions import BookingError, DispatchError
from pricing.models import DistanceRate, FareBreakdown, FareRequest, FlatRouteRate, HourlyRate, VehicleType

router = APIRouter()


@router.post("", response_model=BookingResult, status_code=201)
@limiter.limit(bookings_limit)
def create_booking(
    request: Request,
    body: BookingRequest,
    service: BookingServiceDep,
) -> BookingResult:
    """Price and persist a booking as a pending ride.

    Returns the ride together with the itemized fare so the client can show
    a receipt without a second call.
    """
    try:
        return service.create_booking(body)
    except BookingError as e:
        raise HTTPException(status_code=400, detail=e.message) from e


@router.post("/estimate", response_model=FareBreakdown)
@limiter.limit(bookings_limit)
def estimate_fare(
    request: Request,
    body: FareRequest,
    service: BookingServiceDep,
) -> FareBreakdown:
    try:
        return service.estimate(body)
    except DispatchError as e:
        raise HTTPException(status_code=400, detail=f"fare calculation failed: {e.message}") from e


@router.get("/routes", response_model=None)
def list_routes(
    catalog: RateCatalogDep,
    vehicle_type: Annotated[VehicleType | None, Query(alias="vehicleType")] = None,
) -> list[FlatRouteRate]:
    """Active flat routes, optionally for one vehicle type."""
    return catalog.available_routes(vehicle_type)


@router.get("/pricing", response_model=None)
def vehicle_pricing(catalog: RateCatalogDep) -> dict[str, list[DistanceRate | HourlyRate]]:
    """Distance rates for every vehicle type plus the active hourly rates."""
    return catalog.vehicle_pricing()
