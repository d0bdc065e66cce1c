import math

import pytest

from geo.distance import EARTH_RADIUS_KM, Coordinate, distance_between, haversine_distance_km


@pytest.mark.unit
class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_distance_km(48.8566, 2.3522, 48.8566, 2.3522) == 0.0

    def test_paris_short_hop(self):
        """Hotel de Ville to the Louvre area is a little over a kilometre."""
        distance = haversine_distance_km(48.8566, 2.3522, 48.8606, 2.3376)
        assert 1.0 < distance < 1.2

    def test_one_degree_of_latitude(self):
        distance = haversine_distance_km(0.0, 0.0, 1.0, 0.0)
        assert distance == pytest.approx(EARTH_RADIUS_KM * math.pi / 180)

    def test_symmetric(self):
        a = haversine_distance_km(-23.5505, -46.6333, -23.5629, -46.6544)
        b = haversine_distance_km(-23.5629, -46.6544, -23.5505, -46.6333)
        assert a == pytest.approx(b)

    def test_antipodes(self):
        distance = haversine_distance_km(0.0, 0.0, 0.0, 180.0)
        assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM)

    def test_nan_propagates(self):
        assert math.isnan(haversine_distance_km(float("nan"), 0.0, 1.0, 1.0))


@pytest.mark.unit
def test_distance_between_coordinates():
    pickup = Coordinate(lat=48.8566, lng=2.3522)
    dropoff = Coordinate(lat=48.8606, lng=2.3376)
    assert distance_between(pickup, dropoff) == haversine_distance_km(
        48.8566, 2.3522, 48.8606, 2.3376
    )
