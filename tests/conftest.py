import os

# The API key has no default (the service must fail without it).
# Provide a test value so Settings() can be constructed in tests.
os.environ.setdefault("API_KEY", "test-api-key")

from decimal import Decimal
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.rate_limit import limiter
from db.database import init_database
from db.repositories import RateKind, RateRepository
from db.transaction import unit_of_work
from pricing.catalog import RateCatalog
from pricing.engine import FareEngine
from realtime.bus import EventBus
from realtime.publisher import EventPublisher
from rides.state_store import StateStore

API_KEY = "test-api-key"


@pytest.fixture
def temp_sqlite_db(tmp_path):
    """Temporary SQLite database for persistence tests."""
    return tmp_path / "test_dispatch.db"


@pytest.fixture
def session_factory(temp_sqlite_db):
    return init_database(str(temp_sqlite_db))


@pytest.fixture
def rate_ids(session_factory) -> dict[str, int]:
    """Seed the rate tables used across pricing and booking tests.

    Returns the ids of the rules tests refer to by name.
    """
    with unit_of_work(session_factory) as session:
        repo = RateRepository(session)
        repo.create(
            RateKind.DISTANCE,
            {"vehicle_type": "economy_4", "base_fare": Decimal("5.00"), "per_km": Decimal("1.50")},
        )
        repo.create(
            RateKind.DISTANCE,
            {"vehicle_type": "van_luxe", "base_fare": Decimal("20.00"), "per_km": Decimal("3.00")},
        )
        repo.create(
            RateKind.HOURLY,
            {
                "vehicle_type": "business",
                "price_per_hour": Decimal("30.00"),
                "minimum_hours": 2.0,
                "maximum_hours": 12.0,
                "is_active": True,
            },
        )
        repo.create(
            RateKind.HOURLY,
            {
                "vehicle_type": "executive",
                "price_per_hour": Decimal("50.00"),
                "minimum_hours": None,
                "maximum_hours": None,
                "is_active": True,
            },
        )
        repo.create(
            RateKind.HOURLY,
            {
                "vehicle_type": "van_economy",
                "price_per_hour": Decimal("25.00"),
                "minimum_hours": 1.0,
                "maximum_hours": 8.0,
                "is_active": False,
            },
        )
        route = repo.create(
            RateKind.ROUTE,
            {
                "route_name": "CDG to Paris",
                "from_location": "CDG Airport",
                "to_location": "Paris Centre",
                "vehicle_type": "van_luxe",
                "price": Decimal("160.00"),
                "is_active": True,
            },
        )
        inactive_route = repo.create(
            RateKind.ROUTE,
            {
                "route_name": "Orly to Paris",
                "from_location": "Orly Airport",
                "to_location": "Paris Centre",
                "vehicle_type": "van_luxe",
                "price": Decimal("120.00"),
                "is_active": False,
            },
        )
        repo.create(
            RateKind.EXTRA,
            {
                "item": "Child Seat",
                "price": Decimal("10.00"),
                "applicable_vehicle_types": "all",
                "is_active": True,
            },
        )
        repo.create(
            RateKind.EXTRA,
            {
                "item": "Ski rack",
                "price": Decimal("15.00"),
                "applicable_vehicle_types": "van_economy,van_luxe",
                "is_active": True,
            },
        )
        repo.create(
            RateKind.EXTRA,
            {
                "item": "Champagne",
                "price": Decimal("40.00"),
                "applicable_vehicle_types": "all",
                "is_active": False,
            },
        )
        return {"route": route.id, "inactive_route": inactive_route.id}


@pytest.fixture
def catalog(session_factory):
    return RateCatalog(session_factory)


@pytest.fixture
def fare_engine(catalog):
    return FareEngine(catalog)


@pytest.fixture
def mock_bus():
    """Event bus stand-in recording emit(topic, payload) calls."""
    bus = Mock(spec=EventBus)
    bus.emit.return_value = 1
    return bus


@pytest.fixture
def store(session_factory, mock_bus):
    return StateStore(session_factory, EventPublisher(mock_bus))


@pytest.fixture(autouse=True)
def _fresh_rate_limiter():
    """Rate limit counters are module-level; clear them between tests."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def event_bus():
    return EventBus(heartbeat_interval=0.05, max_queue_size=50)


@pytest.fixture
def app(session_factory, event_bus):
    return create_app(session_factory, event_bus=event_bus)


@pytest.fixture
def test_client(app):
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def auth_headers():
    return {"X-API-Key": API_KEY}
