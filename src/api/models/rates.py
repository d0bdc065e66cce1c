"""Admin request bodies for the fare rule tables."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from db.repositories import RateKind
from pricing.models import VehicleType


class RateBody(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class DistanceRateCreate(RateBody):
    vehicle_type: VehicleType
    base_fare: Decimal = Field(ge=0)
    per_km: Decimal = Field(ge=0)


class DistanceRatePatch(RateBody):
    base_fare: Decimal | None = Field(default=None, ge=0)
    per_km: Decimal | None = Field(default=None, ge=0)


class FlatRouteRateCreate(RateBody):
    route_name: str = Field(min_length=1)
    from_location: str = Field(min_length=1)
    to_location: str = Field(min_length=1)
    vehicle_type: VehicleType
    price: Decimal = Field(ge=0)
    is_active: bool = True


class FlatRouteRatePatch(RateBody):
    route_name: str | None = Field(default=None, min_length=1)
    from_location: str | None = Field(default=None, min_length=1)
    to_location: str | None = Field(default=None, min_length=1)
    vehicle_type: VehicleType | None = None
    price: Decimal | None = Field(default=None, ge=0)
    is_active: bool | None = None


class HourlyRateCreate(RateBody):
    vehicle_type: VehicleType
    price_per_hour: Decimal = Field(ge=0)
    minimum_hours: float | None = Field(default=None, gt=0)
    maximum_hours: float | None = Field(default=None, gt=0)
    is_active: bool = True

    @model_validator(mode="after")
    def validate_hour_bounds(self) -> "HourlyRateCreate":
        if (
            self.minimum_hours is not None
            and self.maximum_hours is not None
            and self.minimum_hours > self.maximum_hours
        ):
            raise ValueError("minimumHours must not exceed maximumHours")
        return self


class HourlyRatePatch(RateBody):
    vehicle_type: VehicleType | None = None
    price_per_hour: Decimal | None = Field(default=None, ge=0)
    minimum_hours: float | None = Field(default=None, gt=0)
    maximum_hours: float | None = Field(default=None, gt=0)
    is_active: bool | None = None


class ExtraRateCreate(RateBody):
    item: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    applicable_vehicle_types: str = "all"
    is_active: bool = True


class ExtraRatePatch(RateBody):
    item: str | None = Field(default=None, min_length=1)
    price: Decimal | None = Field(default=None, ge=0)
    applicable_vehicle_types: str | None = None
    is_active: bool | None = None


RATE_CREATE_MODELS: dict[RateKind, type[RateBody]] = {
    RateKind.DISTANCE: DistanceRateCreate,
    RateKind.ROUTE: FlatRouteRateCreate,
    RateKind.HOURLY: HourlyRateCreate,
    RateKind.EXTRA: ExtraRateCreate,
}

RATE_PATCH_MODELS: dict[RateKind, type[RateBody]] = {
    RateKind.DISTANCE: DistanceRatePatch,
    RateKind.ROUTE: FlatRouteRatePatch,
    RateKind.HOURLY: HourlyRatePatch,
    RateKind.EXTRA: ExtraRatePatch,
}

# Fields an update may explicitly clear back to null.
NULLABLE_RATE_FIELDS = frozenset({"minimum_hours", "maximum_hours"})


def patch_values(body: RateBody) -> dict[str, object]:
    """Supplied fields of a patch, ignoring nulls for required columns."""
    return {
        k: v
        for k, v in body.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_RATE_FIELDS
    }
