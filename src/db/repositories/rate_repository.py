"""Rate repository for fare rule lookups and admin CRUD."""

from enum import Enum
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, ValidationError

from pricing.models import (
    DistanceRate,
    ExtraRate,
    FlatRouteRate,
    HourlyRate,
    RateModel,
    VehicleType,
)

from ..schema import Base, DistanceFare, ExtraFare, FlatRouteFare, HourlyFare
from ..utils import column_values


class RateKind(str, Enum):
    """Admin-facing rate tables."""

    DISTANCE = "distance"
    ROUTE = "routes"
    HOURLY = "hourly"
    EXTRA = "extras"

    @property
    def event_prefix(self) -> str:
        return {
            RateKind.DISTANCE: "fare_distance",
            RateKind.ROUTE: "fare_route",
            RateKind.HOURLY: "fare_hourly",
            RateKind.EXTRA: "fare_extra",
        }[self]


_TABLES: dict[RateKind, tuple[type[Base], type[RateModel]]] = {
    RateKind.DISTANCE: (DistanceFare, DistanceRate),
    RateKind.ROUTE: (FlatRouteFare, FlatRouteRate),
    RateKind.HOURLY: (HourlyFare, HourlyRate),
    RateKind.EXTRA: (ExtraFare, ExtraRate),
}


class RateRepository:
    """Repository for fare rule tables."""

    def __init__(self, session: Session):
        self.session = session

    # --- Pricing lookups ---

    def get_distance_rate(self, vehicle_type: VehicleType) -> DistanceRate | None:
        stmt = select(DistanceFare).where(DistanceFare.vehicle_type == vehicle_type.value)
        row = self.session.execute(stmt).scalars().first()
        return DistanceRate.model_validate(row) if row else None

    def get_active_flat_route(
        self, route_id: int, vehicle_type: VehicleType
    ) -> FlatRouteRate | None:
        stmt = select(FlatRouteFare).where(
            FlatRouteFare.id == route_id,
            FlatRouteFare.vehicle_type == vehicle_type.value,
            FlatRouteFare.is_active.is_(True),
        )
        row = self.session.execute(stmt).scalars().first()
        return FlatRouteRate.model_validate(row) if row else None

    def get_active_hourly_rate(self, vehicle_type: VehicleType) -> HourlyRate | None:
        stmt = (
            select(HourlyFare)
            .where(
                HourlyFare.vehicle_type == vehicle_type.value,
                HourlyFare.is_active.is_(True),
            )
            .order_by(HourlyFare.id)
        )
        row = self.session.execute(stmt).scalars().first()
        return HourlyRate.model_validate(row) if row else None

    def list_active_extras(self) -> list[ExtraRate]:
        stmt = select(ExtraFare).where(ExtraFare.is_active.is_(True)).order_by(ExtraFare.id)
        return [ExtraRate.model_validate(r) for r in self.session.execute(stmt).scalars()]

    def list_active_flat_routes(self, vehicle_type: VehicleType | None = None) -> list[FlatRouteRate]:
        stmt = select(FlatRouteFare).where(FlatRouteFare.is_active.is_(True))
        if vehicle_type is not None:
            stmt = stmt.where(FlatRouteFare.vehicle_type == vehicle_type.value)
        stmt = stmt.order_by(FlatRouteFare.id)
        return [FlatRouteRate.model_validate(r) for r in self.session.execute(stmt).scalars()]

    def list_active_hourly_rates(self) -> list[HourlyRate]:
        stmt = select(HourlyFare).where(HourlyFare.is_active.is_(True)).order_by(HourlyFare.id)
        return [HourlyRate.model_validate(r) for r in self.session.execute(stmt).scalars()]

    # --- Admin CRUD ---

    def list_rates(self, kind: RateKind) -> list[RateModel]:
        table, model = _TABLES[kind]
        stmt = select(table).order_by(table.id)  # type: ignore[attr-defined]
        return [model.model_validate(r) for r in self.session.execute(stmt).scalars()]

    def get(self, kind: RateKind, rate_id: int) -> RateModel | None:
        table, model = _TABLES[kind]
        row = self.session.get(table, rate_id)
        return model.model_validate(row) if row else None

    def create(self, kind: RateKind, values: dict[str, Any]) -> RateModel:
        table, model = _TABLES[kind]
        row = table(**column_values(values))
        self.session.add(row)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise _conflict(kind) from e
        return model.model_validate(row)

    def update(self, kind: RateKind, rate_id: int, values: dict[str, Any]) -> RateModel | None:
        """Apply a partial update in a single UPDATE ... RETURNING statement."""
        table, model = _TABLES[kind]
        if not values:
            return self.get(kind, rate_id)
        stmt = (
            update(table)
            .where(table.id == rate_id)  # type: ignore[attr-defined]
            .values(**column_values(values))
            .returning(table)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        try:
            row = self.session.execute(stmt).scalars().first()
        except IntegrityError as e:
            raise _conflict(kind) from e
        if row is None:
            return None
        rate = model.model_validate(row)
        if isinstance(rate, HourlyRate):
            _check_hour_bounds(rate)
        return rate

    def delete(self, kind: RateKind, rate_id: int) -> bool:
        table, _ = _TABLES[kind]
        stmt = delete(table).where(table.id == rate_id)  # type: ignore[attr-defined]
        result = self.session.execute(stmt)
        return bool(result.rowcount)


def _conflict(kind: RateKind) -> ConflictError:
    if kind == RateKind.DISTANCE:
        return ConflictError("a distance rate for this vehicle type already exists")
    return ConflictError(f"{kind.value} rate conflicts with an existing record")


def _check_hour_bounds(rate: HourlyRate) -> None:
    """Bounds are checked on the merged row, so a patch cannot invert them."""
    low, high = rate.minimum_hours, rate.maximum_hours
    if low is not None and high is not None and low > high:
        raise ValidationError(
            "minimumHours must not exceed maximumHours",
            details={"minimumHours": low, "maximumHours": high},
        )
