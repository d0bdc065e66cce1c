"""Ride and driver domain models and the state store."""
