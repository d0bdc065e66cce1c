"""Repository layer for database CRUD operations."""

from .driver_repository import DriverRepository
from .rate_repository import RateKind, RateRepository
from .ride_repository import RideRepository

__all__ = [
    "DriverRepository",
    "RateKind",
    "RateRepository",
    "RideRepository",
]
