"""Ride and driver state store.

Every mutation runs in its own unit of work and is published only after the
commit succeeds.
"""

import logging
from typing import Any

from sqlalchemy.orm import sessionmaker

from app_logging import log_context, log_ride_context
from core.exceptions import RideStateError, ValidationError
from db.repositories import DriverRepository, RideRepository
from db.transaction import unit_of_work
from db.utils import utc_now
from realtime.publisher import EventPublisher

from .driver import Driver, DriverCreate, DriverPatch, KycStatus
from .ride import Ride, RideAction, RideCreate, RideStatus

logger = logging.getLogger(__name__)


class StateStore:
    """Holds rides and drivers and applies their named transitions."""

    def __init__(self, session_factory: sessionmaker[Any], publisher: EventPublisher | None = None):
        self._session_factory = session_factory
        self.publisher = publisher or EventPublisher()

    # --- Rides ---

    def create_ride(self, data: RideCreate) -> Ride:
        with unit_of_work(self._session_factory) as session:
            ride = RideRepository(session).create(data)
        with log_ride_context(ride.id, customer_id=ride.customer_id):
            logger.info("Ride created (%s, fare %s)", ride.vehicle_type.value, ride.fare)
        self.publisher.ride_event("created", ride)
        return ride

    def get_ride(self, ride_id: int) -> Ride | None:
        with self._session_factory() as session:
            return RideRepository(session).get(ride_id)

    def list_rides(
        self,
        status: RideStatus | None = None,
        driver_id: int | None = None,
        customer_id: int | None = None,
    ) -> list[Ride]:
        with self._session_factory() as session:
            return RideRepository(session).list(
                status=status, driver_id=driver_id, customer_id=customer_id
            )

    def assign(self, ride_id: int, driver_id: int) -> Ride | None:
        ride = self._transition(
            ride_id,
            RideAction.ASSIGN,
            {"driver_id": driver_id, "start_time": utc_now()},
        )
        if ride is not None:
            self.publisher.driver_event("assigned", {"rideId": ride.id, "driverId": driver_id})
        return ride

    def unassign(self, ride_id: int) -> Ride | None:
        with unit_of_work(self._session_factory) as session:
            repo = RideRepository(session)
            current = repo.current_assignment(ride_id)
            if current is None:
                return None
            previous_driver = current[1]
            ride = repo.transition(
                ride_id,
                RideAction.UNASSIGN,
                {"driver_id": None, "start_time": None},
                expected_driver_id=previous_driver,
            )
        if ride is None:
            return None
        self._log_transition(ride, RideAction.UNASSIGN)
        self.publisher.ride_event(RideAction.UNASSIGN.value, ride)
        self.publisher.driver_event(
            "unassigned", {"rideId": ride.id, "driverId": previous_driver}
        )
        return ride

    def cancel(self, ride_id: int, reason: str | None = None) -> Ride | None:
        return self._transition(
            ride_id,
            RideAction.CANCEL,
            {"end_time": utc_now(), "cancellation_reason": reason},
        )

    def complete(self, ride_id: int) -> Ride | None:
        return self._transition(ride_id, RideAction.COMPLETE, {"end_time": utc_now()})

    def transfer(self, ride_id: int, to_driver_id: int) -> Ride | None:
        """Move an assigned ride to another driver.

        The guarded UPDATE also checks the driver read beforehand, so a
        concurrent reassignment makes this call fail instead of silently
        overwriting it.
        """
        with unit_of_work(self._session_factory) as session:
            repo = RideRepository(session)
            current = repo.current_assignment(ride_id)
            if current is None:
                return None
            status, from_driver_id = current
            if from_driver_id is None:
                raise RideStateError(ride_id, RideAction.TRANSFER.verb, status.value)
            if from_driver_id == to_driver_id:
                raise RideStateError(
                    ride_id,
                    RideAction.TRANSFER.verb,
                    status.value,
                    message=f"Ride {ride_id} is already assigned to driver {to_driver_id}",
                )
            ride = repo.transition(
                ride_id,
                RideAction.TRANSFER,
                {"driver_id": to_driver_id},
                expected_driver_id=from_driver_id,
            )
        if ride is None:
            return None
        self._log_transition(ride, RideAction.TRANSFER)
        self.publisher.ride_event(RideAction.TRANSFER.value, ride)
        self.publisher.driver_event(
            "transferred",
            {"rideId": ride.id, "fromDriverId": from_driver_id, "toDriverId": to_driver_id},
        )
        return ride

    def _transition(self, ride_id: int, action: RideAction, values: dict[str, Any]) -> Ride | None:
        with unit_of_work(self._session_factory) as session:
            ride = RideRepository(session).transition(ride_id, action, values)
        if ride is None:
            return None
        self._log_transition(ride, action)
        self.publisher.ride_event(action.value, ride)
        return ride

    def _log_transition(self, ride: Ride, action: RideAction) -> None:
        with log_ride_context(ride.id, driver_id=ride.driver_id):
            logger.info("Applied %s, ride now %s", action.verb, ride.status.value)

    # --- Drivers ---

    def create_driver(self, data: DriverCreate) -> Driver:
        with unit_of_work(self._session_factory) as session:
            driver = DriverRepository(session).create(data)
        self.publisher.driver_event("created", driver)
        return driver

    def get_driver(self, driver_id: int) -> Driver | None:
        with self._session_factory() as session:
            return DriverRepository(session).get(driver_id)

    def list_drivers(self, online: bool | None = None) -> list[Driver]:
        with self._session_factory() as session:
            return DriverRepository(session).list(online=online)

    def update_driver(self, driver_id: int, patch: DriverPatch) -> Driver | None:
        with unit_of_work(self._session_factory) as session:
            driver = DriverRepository(session).update(driver_id, patch)
        if driver is None:
            return None
        with log_context(driver_id=driver_id):
            logger.info(
                "Driver updated (%s)", ", ".join(sorted(patch.model_fields_set)) or "no fields"
            )
        self.publisher.driver_event("updated", driver)
        return driver

    def set_kyc_status(
        self,
        driver_id: int,
        status: KycStatus,
        notes: str | None = None,
        reason: str | None = None,
    ) -> Driver | None:
        if status == KycStatus.REJECTED and not (reason and reason.strip()):
            raise ValidationError("Rejection reason is required")
        with unit_of_work(self._session_factory) as session:
            driver = DriverRepository(session).set_kyc_status(driver_id, status, notes, reason)
        if driver is None:
            return None
        with log_context(driver_id=driver_id):
            logger.info("Driver KYC set to %s", status.value)
        self.publisher.driver_event("kyc_updated", driver)
        return driver

    def request_manual_review(self, driver_id: int, notes: str | None = None) -> Driver | None:
        with unit_of_work(self._session_factory) as session:
            driver = DriverRepository(session).request_manual_review(driver_id, notes)
        if driver is None:
            return None
        self.publisher.driver_event("review_requested", driver)
        return driver
