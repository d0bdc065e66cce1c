"""Database persistence module."""

from .database import init_database
from .schema import Driver, Ride
from .transaction import transaction, unit_of_work

__all__ = [
    "init_database",
    "Driver",
    "Ride",
    "transaction",
    "unit_of_work",
]
