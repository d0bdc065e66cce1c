"""Read-side access to the active fare rules."""

import logging
from typing import Any

from sqlalchemy.orm import sessionmaker

from core.exceptions import RuleMissingError
from db.repositories.rate_repository import RateKind, RateRepository

from .models import DistanceRate, ExtraRate, FlatRouteRate, HourlyRate, VehicleType

logger = logging.getLogger(__name__)


class RateCatalog:
    """Looks up the single rule that prices a request.

    Each lookup runs in its own short-lived session; rules are read fresh so
    admin edits apply to the next quote.
    """

    def __init__(self, session_factory: sessionmaker[Any]):
        self._session_factory = session_factory

    def distance_rate(self, vehicle_type: VehicleType) -> DistanceRate:
        with self._session_factory() as session:
            rule = RateRepository(session).get_distance_rate(vehicle_type)
        if rule is None:
            raise RuleMissingError(
                "distance",
                vehicle_type.value,
                f"Distance fare not found for vehicle type: {vehicle_type.value}",
            )
        return rule

    def flat_route_rate(self, route_id: int, vehicle_type: VehicleType) -> FlatRouteRate:
        with self._session_factory() as session:
            rule = RateRepository(session).get_active_flat_route(route_id, vehicle_type)
        if rule is None:
            raise RuleMissingError(
                "route", (route_id, vehicle_type.value), "Route fare not found or inactive"
            )
        return rule

    def hourly_rate(self, vehicle_type: VehicleType) -> HourlyRate:
        with self._session_factory() as session:
            rule = RateRepository(session).get_active_hourly_rate(vehicle_type)
        if rule is None:
            raise RuleMissingError(
                "hourly", vehicle_type.value, "Hourly fare not found or inactive"
            )
        return rule

    def extra_rate(self, item: str, vehicle_type: VehicleType) -> ExtraRate | None:
        """Active extra matching ``item`` (case-insensitive) for the vehicle type, if any."""
        with self._session_factory() as session:
            extras = RateRepository(session).list_active_extras()
        for extra in extras:
            if extra.matches(item) and extra.applies_to(vehicle_type):
                return extra
        logger.debug("No active extra '%s' for %s", item, vehicle_type.value)
        return None

    def available_routes(self, vehicle_type: VehicleType | None = None) -> list[FlatRouteRate]:
        with self._session_factory() as session:
            return RateRepository(session).list_active_flat_routes(vehicle_type)

    def vehicle_pricing(self) -> dict[str, list[Any]]:
        """Distance rules for every vehicle type plus the active hourly rules."""
        with self._session_factory() as session:
            repo = RateRepository(session)
            return {
                "distance": repo.list_rates(RateKind.DISTANCE),
                "hourly": repo.list_active_hourly_rates(),
            }
