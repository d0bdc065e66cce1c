"""Ride repository with guarded, single-statement status transitions."""

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from core.exceptions import RideStateError
from rides.ride import VALID_TRANSITIONS, RideAction, RideCreate, RideStatus
from rides.ride import Ride as RideDomain

from ..schema import Ride
from ..utils import column_values, utc_now


class RideRepository:
    """Repository for ride CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, data: RideCreate) -> RideDomain:
        """Create a new ride in PENDING status."""
        values = column_values(data.model_dump())
        ride = Ride(
            **values,
            status=RideStatus.PENDING.value,
            request_time=utc_now(),
        )
        self.session.add(ride)
        self.session.flush()
        return self._to_domain(ride)

    def get(self, ride_id: int) -> RideDomain | None:
        ride = self.session.get(Ride, ride_id)
        if ride is None:
            return None
        return self._to_domain(ride)

    def list(
        self,
        status: RideStatus | None = None,
        driver_id: int | None = None,
        customer_id: int | None = None,
    ) -> list[RideDomain]:
        stmt = select(Ride)
        if status is not None:
            stmt = stmt.where(Ride.status == status.value)
        if driver_id is not None:
            stmt = stmt.where(Ride.driver_id == driver_id)
        if customer_id is not None:
            stmt = stmt.where(Ride.customer_id == customer_id)
        stmt = stmt.order_by(Ride.id)
        return [self._to_domain(r) for r in self.session.execute(stmt).scalars()]

    def current_assignment(self, ride_id: int) -> tuple[RideStatus, int | None] | None:
        """Status and driver of a ride, read without loading the entity."""
        stmt = select(Ride.status, Ride.driver_id).where(Ride.id == ride_id)
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return RideStatus(row.status), row.driver_id

    def transition(
        self,
        ride_id: int,
        action: RideAction,
        values: dict[str, Any] | None = None,
        expected_driver_id: int | None = None,
    ) -> RideDomain | None:
        """Apply a named transition as one UPDATE ... WHERE status IN (...) RETURNING.

        Returns None when the ride does not exist. Raises RideStateError when
        the ride exists but its status (or, with ``expected_driver_id``, its
        driver) no longer allows the transition.
        """
        sources, target = VALID_TRANSITIONS[action]
        stmt = update(Ride).where(
            Ride.id == ride_id,
            Ride.status.in_([s.value for s in sources]),
        )
        if expected_driver_id is not None:
            stmt = stmt.where(Ride.driver_id == expected_driver_id)
        stmt = (
            stmt.values(status=target.value, **(values or {}))
            .returning(Ride)
            .execution_options(synchronize_session=False, populate_existing=True)
        )

        ride = self.session.execute(stmt).scalars().first()
        if ride is not None:
            return self._to_domain(ride)

        current = self.current_assignment(ride_id)
        if current is None:
            return None
        raise RideStateError(ride_id, action.verb, current[0].value)

    def _to_domain(self, ride: Ride) -> RideDomain:
        return RideDomain.model_validate(ride)
