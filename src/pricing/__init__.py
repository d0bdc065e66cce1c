"""Fare rules, the rate catalog and the fare engine.

Only the models are re-exported here: ``pricing.catalog`` and
``pricing.engine`` depend on ``db.repositories``, which itself imports
``pricing.models``.
"""

from .models import CalculationType, FareBreakdown, FareRequest, VehicleType

__all__ = [
    "CalculationType",
    "FareBreakdown",
    "FareRequest",
    "VehicleType",
]
