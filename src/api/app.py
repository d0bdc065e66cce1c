"""FastAPI application factory for the dispatch service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from api.middleware.correlation import CorrelationIdMiddleware
from api.models.health import HealthResponse
from api.rate_limit import StreamConnectionLimiter, limiter, rate_limit_exceeded_handler
from api.routes import admin_drivers, admin_rates, admin_rides, bookings, events, rides
from booking.orchestrator import BookingService
from pricing.admin import RateAdmin
from pricing.catalog import RateCatalog
from pricing.engine import FareEngine
from realtime.bus import EventBus
from realtime.publisher import EventPublisher
from rides.state_store import StateStore
from settings import Settings, get_settings

if TYPE_CHECKING:
    from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)


def create_app(
    session_factory: sessionmaker[Any],
    settings: Settings | None = None,
    event_bus: EventBus | None = None,
) -> FastAPI:
    """Create FastAPI application with injected dependencies.

    Args:
        session_factory: SQLAlchemy session factory from init_database
        settings: Application settings (loaded from the environment if omitted).
            Stored on app.state and also the source of the API key checked by
            the auth dependencies.
        event_bus: Event bus for server-sent events (created from settings if omitted)
    """
    settings = settings or get_settings()
    bus = event_bus or EventBus(
        heartbeat_interval=settings.realtime.heartbeat_interval_seconds,
        max_queue_size=settings.realtime.max_queue_size,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> Any:
        """Manage application startup and shutdown."""
        logger.info("Dispatch API ready")
        yield
        bus.close_all()
        logger.info("Closed all event streams")

    app = FastAPI(
        title="Ride Dispatch API",
        version="1.0.0",
        description="Fare quotes, bookings, ride dispatch and live event streams",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Set core dependencies immediately (not in lifespan) so they're available for testing
    publisher = EventPublisher(bus)
    catalog = RateCatalog(session_factory)
    store = StateStore(session_factory, publisher)

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.event_bus = bus
    app.state.rate_catalog = catalog
    app.state.state_store = store
    app.state.booking_service = BookingService(FareEngine(catalog), store)
    app.state.rate_admin = RateAdmin(session_factory, publisher)
    app.state.stream_limiter = StreamConnectionLimiter(
        max_connections=settings.rate_limit.stream_connections_per_minute,
        window_seconds=60,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(bookings.router, prefix="/api/bookings", tags=["bookings"])
    app.include_router(rides.router, prefix="/api/rides", tags=["rides"])
    app.include_router(admin_rides.router, prefix="/api/admin/rides", tags=["admin"])
    app.include_router(admin_drivers.router, prefix="/api/admin/drivers", tags=["admin"])
    app.include_router(admin_drivers.driver_router, prefix="/api/drivers", tags=["drivers"])
    app.include_router(admin_rates.router, prefix="/api/admin/fares", tags=["admin"])
    app.include_router(events.router, prefix="/api", tags=["events"])

    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        """Health check endpoint for monitoring (unauthenticated for infrastructure)."""
        try:
            with session_factory() as session:
                session.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Health check could not reach the database")
            return HealthResponse(
                status="unhealthy", database="unavailable", subscribers=bus.connection_count
            )
        return HealthResponse(status="healthy", database="connected", subscribers=bus.connection_count)

    return app
