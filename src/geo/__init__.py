"""Geographic helpers."""

from .distance import EARTH_RADIUS_KM, Coordinate, distance_between, haversine_distance_km

__all__ = ["EARTH_RADIUS_KM", "Coordinate", "distance_between", "haversine_distance_km"]
