from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from api.auth import verify_api_key
from api.dependencies import StateStoreDep
from api.models.admin import AssignRideRequest, CancelRideRequest, TransferRideRequest
from core.exceptions import RideStateError
from rides.ride import Ride, RideStatus

router = APIRouter(dependencies=[Depends(verify_api_key)])


def _apply(ride_id: int, action: Callable[[], Ride | None]) -> Ride:
    """Run a transition, mapping a missing ride to 404 and a bad state to 409."""
    try:
        ride = action()
    except RideStateError as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    if ride is None:
        raise HTTPException(status_code=404, detail=f"Ride {ride_id} not found")
    return ride


@router.get("", response_model=list[Ride])
def list_rides(
    store: StateStoreDep,
    status: RideStatus | None = None,
    driver_id: Annotated[int | None, Query(alias="driverId")] = None,
    customer_id: Annotated[int | None, Query(alias="customerId")] = None,
) -> list[Ride]:
    return store.list_rides(status=status, driver_id=driver_id, customer_id=customer_id)


@router.post("/{ride_id}/assign", response_model=Ride)
def assign_ride(ride_id: int, body: AssignRideRequest, store: StateStoreDep) -> Ride:
    return _apply(ride_id, lambda: store.assign(ride_id, body.driver_id))


@router.post("/{ride_id}/unassign", response_model=Ride)
def unassign_ride(ride_id: int, store: StateStoreDep) -> Ride:
    return _apply(ride_id, lambda: store.unassign(ride_id))


@router.post("/{ride_id}/cancel", response_model=Ride)
def cancel_ride(
    ride_id: int,
    store: StateStoreDep,
    body: CancelRideRequest | None = None,
) -> Ride:
    reason = body.reason if body else None
    return _apply(ride_id, lambda: store.cancel(ride_id, reason))


@router.post("/{ride_id}/complete", response_model=Ride)
def complete_ride(ride_id: int, store: StateStoreDep) -> Ride:
    return _apply(ride_id, lambda: store.complete(ride_id))


@router.post("/{ride_id}/transfer", response_model=Ride)
def transfer_ride(ride_id: int, body: TransferRideRequest, store: StateStoreDep) -> Ride:
    return _apply(ride_id, lambda: store.transfer(ride_id, body.to_driver_id))
