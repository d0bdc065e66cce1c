"""Pydantic models for API requests and responses."""

from api.models.admin import (
    ApproveDriverRequest,
    AssignRideRequest,
    CancelRideRequest,
    ManualReviewRequest,
    RejectDriverRequest,
    TransferRideRequest,
)
from api.models.health import HealthResponse
from api.models.rates import RATE_CREATE_MODELS, RATE_PATCH_MODELS

__all__ = [
    # Admin transition bodies
    "AssignRideRequest",
    "CancelRideRequest",
    "TransferRideRequest",
    # Driver verification bodies
    "ApproveDriverRequest",
    "RejectDriverRequest",
    "ManualReviewRequest",
    # Rate bodies
    "RATE_CREATE_MODELS",
    "RATE_PATCH_MODELS",
    # Health
    "HealthResponse",
]
