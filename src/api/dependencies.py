"""FastAPI dependency injection providers."""

from typing import Annotated, Any

from fastapi import Depends, Request

from booking.orchestrator import BookingService
from pricing.admin import RateAdmin
from pricing.catalog import RateCatalog
from realtime.bus import EventBus
from rides.state_store import StateStore


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def get_state_store(request: Request) -> StateStore:
    return request.app.state.state_store


def get_rate_catalog(request: Request) -> RateCatalog:
    return request.app.state.rate_catalog


def get_rate_admin(request: Request) -> RateAdmin:
    return request.app.state.rate_admin


def get_event_bus(request: Request) -> EventBus:
    return request.app.state.event_bus


def get_session_factory(request: Request) -> Any:
    return request.app.state.session_factory


BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
StateStoreDep = Annotated[StateStore, Depends(get_state_store)]
RateCatalogDep = Annotated[RateCatalog, Depends(get_rate_catalog)]
RateAdminDep = Annotated[RateAdmin, Depends(get_rate_admin)]
EventBusDep = Annotated[EventBus, Depends(get_event_bus)]
SessionFactoryDep = Annotated[Any, Depends(get_session_factory)]
