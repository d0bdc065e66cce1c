"""Fare engine: picks one pricing mode, adds extras, returns an itemized breakdown."""

import logging
from decimal import Decimal

from core.exceptions import DispatchError, InvalidFareRequestError
from geo.distance import distance_between

from .catalog import RateCatalog
from .models import (
    BreakdownDetail,
    CalculationType,
    ExtraCharge,
    FareBreakdown,
    FareRequest,
    to_money,
)

logger = logging.getLogger(__name__)


class FareEngine:
    """Prices a FareRequest against the rate catalog.

    Mode priority is route, then hourly, then distance. The first mode whose
    inputs are present wins even when the caller supplies several.
    """

    def __init__(self, catalog: RateCatalog):
        self.catalog = catalog

    def compute_fare(self, request: FareRequest) -> FareBreakdown:
        try:
            if request.route_id is not None:
                fare = self._route_fare(request)
            elif request.is_hourly and request.estimated_hours:
                fare = self._hourly_fare(request)
            elif request.has_coordinates:
                fare = self._distance_fare(request)
            else:
                raise InvalidFareRequestError()
        except DispatchError as e:
            logger.warning(
                "Fare calculation failed for %s: %s",
                request.vehicle_type.value,
                e.message,
                extra={"details": e.details},
            )
            raise

        if request.extras:
            self._apply_extras(fare, request)

        # Re-validate so total_fare is summed from the final components
        return FareBreakdown.model_validate(fare.model_dump())

    def _route_fare(self, request: FareRequest) -> FareBreakdown:
        assert request.route_id is not None
        rule = self.catalog.flat_route_rate(request.route_id, request.vehicle_type)
        price = to_money(rule.price)
        return FareBreakdown(
            base_fare=price,
            calculation_type=CalculationType.ROUTE,
            breakdown=BreakdownDetail(route_price=price),
        )

    def _hourly_fare(self, request: FareRequest) -> FareBreakdown:
        assert request.estimated_hours is not None
        rule = self.catalog.hourly_rate(request.vehicle_type)
        hours = rule.effective_hours(request.estimated_hours)
        return FareBreakdown(
            time_fare=to_money(rule.price_per_hour * Decimal(str(hours))),
            calculation_type=CalculationType.HOURLY,
            breakdown=BreakdownDetail(hourly_rate=to_money(rule.price_per_hour), hours=hours),
        )

    def _distance_fare(self, request: FareRequest) -> FareBreakdown:
        assert request.pickup is not None and request.dropoff is not None
        rule = self.catalog.distance_rate(request.vehicle_type)
        distance_km = distance_between(request.pickup, request.dropoff)
        return FareBreakdown(
            base_fare=to_money(rule.base_fare),
            distance_fare=to_money(rule.per_km * Decimal(str(distance_km))),
            calculation_type=CalculationType.DISTANCE,
            breakdown=BreakdownDetail(
                base=to_money(rule.base_fare),
                per_km=to_money(rule.per_km),
                distance=distance_km,
            ),
        )

    def _apply_extras(self, fare: FareBreakdown, request: FareRequest) -> None:
        """Add every resolvable extra. Unknown or inapplicable items are skipped."""
        for item in request.extras:
            extra = self.catalog.extra_rate(item, request.vehicle_type)
            if extra is None:
                continue
            price = to_money(extra.price)
            fare.extras_fare += price
            fare.breakdown.extras.append(ExtraCharge(item=extra.item, price=price))
