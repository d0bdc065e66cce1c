"""Admin maintenance of fare rules."""

import logging
from typing import Any

from sqlalchemy.orm import sessionmaker

from db.repositories.rate_repository import RateKind, RateRepository
from db.transaction import unit_of_work
from realtime.publisher import EventPublisher

from .models import RateModel

logger = logging.getLogger(__name__)


class RateAdmin:
    """CRUD over the four rate tables, publishing each change on ``rates``."""

    def __init__(self, session_factory: sessionmaker[Any], publisher: EventPublisher | None = None):
        self._session_factory = session_factory
        self.publisher = publisher or EventPublisher()

    def list_rates(self, kind: RateKind) -> list[RateModel]:
        with self._session_factory() as session:
            return RateRepository(session).list_rates(kind)

    def create(self, kind: RateKind, values: dict[str, Any]) -> RateModel:
        with unit_of_work(self._session_factory) as session:
            rate = RateRepository(session).create(kind, values)
        logger.info("Created %s rate %s", kind.value, rate.id)
        self.publisher.rate_event(kind.event_prefix, "created", rate)
        return rate

    def update(self, kind: RateKind, rate_id: int, values: dict[str, Any]) -> RateModel | None:
        with unit_of_work(self._session_factory) as session:
            rate = RateRepository(session).update(kind, rate_id, values)
        if rate is None:
            return None
        logger.info("Updated %s rate %s (%s)", kind.value, rate_id, ", ".join(sorted(values)))
        self.publisher.rate_event(kind.event_prefix, "updated", rate)
        return rate

    def delete(self, kind: RateKind, rate_id: int) -> bool:
        with unit_of_work(self._session_factory) as session:
            deleted = RateRepository(session).delete(kind, rate_id)
        if deleted:
            logger.info("Deleted %s rate %s", kind.value, rate_id)
            self.publisher.rate_event(kind.event_prefix, "deleted", {"id": rate_id})
        return deleted
