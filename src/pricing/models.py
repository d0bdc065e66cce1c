"""Pricing domain models: requests, rate rules and fare breakdowns."""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, Protocol

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel

from geo.distance import Coordinate

CENT = Decimal("0.01")

DEFAULT_MINIMUM_HOURS = 1.0
DEFAULT_MAXIMUM_HOURS = 12.0

ALL_VEHICLE_TYPES = "all"

# Serialized as a JSON number; kept exact in Python.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def to_money(value: Decimal | float | int | str) -> Decimal:
    """Quantize a monetary amount to cents (half-up)."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


class VehicleType(str, Enum):
    """Bookable vehicle classes."""

    ECONOMY_4 = "economy_4"
    ECONOMY_5 = "economy_5"
    VAN_ECONOMY = "van_economy"
    VAN_LUXE = "van_luxe"
    BUSINESS = "business"
    EXECUTIVE = "executive"


class CalculationType(str, Enum):
    DISTANCE = "distance"
    ROUTE = "route"
    HOURLY = "hourly"


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, emits camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FareRequest(CamelModel):
    """Pricing-relevant fields of a booking."""

    vehicle_type: VehicleType
    pickup_lat: float | None = None
    pickup_lng: float | None = None
    dropoff_lat: float | None = None
    dropoff_lng: float | None = None
    route_id: int | None = None
    is_hourly: bool = False
    estimated_hours: float | None = Field(default=None, gt=0)
    extras: list[str] = Field(default_factory=list)

    @property
    def has_coordinates(self) -> bool:
        return all(
            v is not None
            for v in (self.pickup_lat, self.pickup_lng, self.dropoff_lat, self.dropoff_lng)
        )

    @property
    def pickup(self) -> Coordinate | None:
        if self.pickup_lat is None or self.pickup_lng is None:
            return None
        return Coordinate(lat=self.pickup_lat, lng=self.pickup_lng)

    @property
    def dropoff(self) -> Coordinate | None:
        if self.dropoff_lat is None or self.dropoff_lng is None:
            return None
        return Coordinate(lat=self.dropoff_lat, lng=self.dropoff_lng)


class PricingRule(Protocol):
    """Capability shared by every rate rule variant."""

    kind: ClassVar[str]

    @property
    def key(self) -> Any: ...


class RateModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int


class DistanceRate(RateModel):
    kind: ClassVar[str] = "distance"

    id: int
    vehicle_type: VehicleType
    base_fare: Money
    per_km: Money

    @property
    def key(self) -> str:
        return self.vehicle_type.value


class FlatRouteRate(RateModel):
    kind: ClassVar[str] = "route"

    id: int
    route_name: str
    from_location: str
    to_location: str
    vehicle_type: VehicleType
    price: Money
    is_active: bool = True

    @property
    def key(self) -> tuple[int, str]:
        return (self.id, self.vehicle_type.value)


class HourlyRate(RateModel):
    kind: ClassVar[str] = "hourly"

    id: int
    vehicle_type: VehicleType
    price_per_hour: Money
    minimum_hours: float | None = None
    maximum_hours: float | None = None
    is_active: bool = True

    @property
    def key(self) -> str:
        return self.vehicle_type.value

    def effective_hours(self, requested: float) -> float:
        """Clamp requested hours: raise to the minimum first, then cap at the maximum."""
        floor = self.minimum_hours or DEFAULT_MINIMUM_HOURS
        ceiling = self.maximum_hours or DEFAULT_MAXIMUM_HOURS
        return min(max(requested, floor), ceiling)


class ExtraRate(RateModel):
    kind: ClassVar[str] = "extra"

    id: int
    item: str
    price: Money
    applicable_vehicle_types: str = ALL_VEHICLE_TYPES
    is_active: bool = True

    @property
    def key(self) -> str:
        return self.item.lower()

    def matches(self, item: str) -> bool:
        return self.item.strip().lower() == item.strip().lower()

    def applies_to(self, vehicle_type: VehicleType | str) -> bool:
        scope = self.applicable_vehicle_types.strip()
        if scope == ALL_VEHICLE_TYPES:
            return True
        value = vehicle_type.value if isinstance(vehicle_type, VehicleType) else vehicle_type
        return value in {v.strip() for v in scope.split(",") if v.strip()}


class ExtraCharge(CamelModel):
    item: str
    price: Money


class BreakdownDetail(CamelModel):
    """The raw numbers behind a fare, for itemized receipts."""

    base: Money | None = None
    per_km: Money | None = None
    distance: float | None = None
    route_price: Money | None = None
    hourly_rate: Money | None = None
    hours: float | None = None
    extras: list[ExtraCharge] = Field(default_factory=list)


class FareBreakdown(CamelModel):
    """Priced fare. total_fare is always recomputed from the components."""

    base_fare: Money = Decimal("0.00")
    distance_fare: Money = Decimal("0.00")
    time_fare: Money = Decimal("0.00")
    extras_fare: Money = Decimal("0.00")
    total_fare: Money = Decimal("0.00")
    calculation_type: CalculationType
    breakdown: BreakdownDetail = Field(default_factory=BreakdownDetail)

    @model_validator(mode="after")
    def _sum_total(self) -> "FareBreakdown":
        self.total_fare = self.base_fare + self.distance_fare + self.time_fare + self.extras_fare
        return self
