"""Great-circle distance calculations.

Distance-mode pricing uses straight-line Haversine distance between the
pickup and dropoff coordinates. There is no routing: the result is the
shortest path over the Earth's surface, not the driven distance.
"""

from math import atan2, cos, radians, sin, sqrt

from pydantic import BaseModel

EARTH_RADIUS_KM = 6371.0


class Coordinate(BaseModel):
    """WGS84 point. Ranges are not validated."""

    lat: float
    lng: float


def haversine_distance_km(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
) -> float:
    """Calculate the great-circle distance between two points in kilometers.

    NaN inputs propagate to a NaN result; out-of-range degrees are not
    rejected.

    Args:
        lat1: Latitude of first point in degrees
        lng1: Longitude of first point in degrees
        lat2: Latitude of second point in degrees
        lng2: Longitude of second point in degrees

    Returns:
        Distance between the two points in kilometers
    """
    lat1, lng1, lat2, lng2 = map(radians, [lat1, lng1, lat2, lng2])
    dlat = lat2 - lat1
    dlng = lng2 - lng1

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_between(origin: Coordinate, destination: Coordinate) -> float:
    """Haversine distance in kilometers between two coordinates."""
    return haversine_distance_km(origin.lat, origin.lng, destination.lat, destination.lng)
