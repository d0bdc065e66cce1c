from fastapi import APIRouter, HTTPException

from api.dependencies import StateStoreDep
from rides.ride import Ride

router = APIRouter()


@router.get("/{ride_id}", response_model=Ride)
def get_ride(ride_id: int, store: StateStoreDep) -> Ride:
    ride = store.get_ride(ride_id)
    if ride is None:
        raise HTTPException(status_code=404, detail=f"Ride {ride_id} not found")
    return ride
