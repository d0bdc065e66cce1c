"""Booking orchestration."""

from .models import BookingRequest, BookingResult
from .orchestrator import BookingService

__all__ = ["BookingRequest", "BookingResult", "BookingService"]
