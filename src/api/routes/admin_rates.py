from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from api.auth import verify_api_key
from api.dependencies import RateAdminDep
from api.models.rates import RATE_CREATE_MODELS, RATE_PATCH_MODELS, RateBody, patch_values
from core.exceptions import ConflictError, ValidationError
from db.repositories import RateKind
from pricing.models import RateModel

router = APIRouter(dependencies=[Depends(verify_api_key)])


def _parse(model: type[RateBody], payload: dict[str, Any]) -> RateBody:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors(include_url=False), body=payload) from e


@router.get("/{kind}", response_model=None)
def list_rates(kind: RateKind, admin: RateAdminDep) -> list[RateModel]:
    return admin.list_rates(kind)


@router.post("/{kind}", status_code=201, response_model=None)
def create_rate(
    kind: RateKind,
    admin: RateAdminDep,
    payload: Annotated[dict[str, Any], Body()],
) -> RateModel:
    body = _parse(RATE_CREATE_MODELS[kind], payload)
    try:
        return admin.create(kind, body.model_dump())
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message) from e


@router.put("/{kind}/{rate_id}", response_model=None)
def update_rate(
    kind: RateKind,
    rate_id: int,
    admin: RateAdminDep,
    payload: Annotated[dict[str, Any], Body()],
) -> RateModel:
    body = _parse(RATE_PATCH_MODELS[kind], payload)
    try:
        rate = admin.update(kind, rate_id, patch_values(body))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    if rate is None:
        raise HTTPException(status_code=404, detail=f"{kind.value} rate {rate_id} not found")
    return rate


@router.delete("/{kind}/{rate_id}")
def delete_rate(
    kind: RateKind,
    rate_id: int,
    admin: RateAdminDep,
) -> dict[str, Any]:
    if not admin.delete(kind, rate_id):
        raise HTTPException(status_code=404, detail=f"{kind.value} rate {rate_id} not found")
    return {"deleted": True, "id": rate_id}
