from fastapi import APIRouter, Depends, HTTPException

from api.auth import verify_api_key
from api.dependencies import StateStoreDep
from api.models.admin import ApproveDriverRequest, ManualReviewRequest, RejectDriverRequest
from core.exceptions import ConflictError, ValidationError
from rides.driver import Driver, DriverCreate, DriverPatch, KycStatus

router = APIRouter(dependencies=[Depends(verify_api_key)])

# Mounted under /api/drivers: driver-initiated verification requests.
driver_router = APIRouter(dependencies=[Depends(verify_api_key)])


def _found(driver_id: int, driver: Driver | None) -> Driver:
    if driver is None:
        raise HTTPException(status_code=404, detail=f"Driver {driver_id} not found")
    return driver


@router.post("", response_model=Driver, status_code=201)
def create_driver(body: DriverCreate, store: StateStoreDep) -> Driver:
    try:
        return store.create_driver(body)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message) from e


@router.get("", response_model=list[Driver])
def list_drivers(store: StateStoreDep, online: bool | None = None) -> list[Driver]:
    return store.list_drivers(online=online)


@router.get("/{driver_id}", response_model=Driver)
def get_driver(driver_id: int, store: StateStoreDep) -> Driver:
    return _found(driver_id, store.get_driver(driver_id))


@router.put("/{driver_id}", response_model=Driver)
def update_driver(driver_id: int, body: DriverPatch, store: StateStoreDep) -> Driver:
    """Partial update. Document or vehicle changes send KYC back to pending."""
    return _found(driver_id, store.update_driver(driver_id, body))


@router.post("/{driver_id}/approve", response_model=Driver)
def approve_driver(
    driver_id: int,
    store: StateStoreDep,
    body: ApproveDriverRequest | None = None,
) -> Driver:
    notes = body.notes if body else None
    return _found(driver_id, store.set_kyc_status(driver_id, KycStatus.APPROVED, notes=notes))


@router.post("/{driver_id}/reject", response_model=Driver)
def reject_driver(driver_id: int, body: RejectDriverRequest, store: StateStoreDep) -> Driver:
    try:
        driver = store.set_kyc_status(
            driver_id, KycStatus.REJECTED, notes=body.notes, reason=body.reason
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    return _found(driver_id, driver)


@driver_router.post("/{driver_id}/kyc/request-review", response_model=Driver)
def request_manual_review(
    driver_id: int,
    store: StateStoreDep,
    body: ManualReviewRequest | None = None,
) -> Driver:
    notes = body.notes if body else None
    return _found(driver_id, store.request_manual_review(driver_id, notes))
