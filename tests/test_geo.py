import math

import pytest

from weather_traveler.core.geo import EARTH_RADIUS_KM, distance_km, driving_time_hours
from weather_traveler.core.models import Coordinate


def test_distance_is_symmetric_and_zero_for_same_point():
    a = Coordinate(latitude=39.7392, longitude=-104.9903)
    b = Coordinate(latitude=36.1699, longitude=-115.1398)

    assert distance_km(a, a) == 0.0
    assert distance_km(a, b) == pytest.approx(distance_km(b, a))


def test_equator_to_pole_is_a_quarter_circumference():
    d = distance_km(Coordinate(latitude=0.0, longitude=0.0), Coordinate(latitude=90.0, longitude=0.0))
    assert d == pytest.approx(EARTH_RADIUS_KM * math.pi / 2)
    assert d == pytest.approx(10007.5, abs=0.1)


def test_denver_to_las_vegas_distance():
    d = distance_km(
        Coordinate(latitude=39.7392, longitude=-104.9903),
        Coordinate(latitude=36.1699, longitude=-115.1398),
    )
    assert 960 < d < 990


def test_driving_time_uses_average_speed():
    assert driving_time_hours(160.0) == pytest.approx(2.0)
    assert driving_time_hours(100.0, average_speed_kmh=50.0) == pytest.approx(2.0)


def test_driving_time_rejects_non_positive_speed():
    with pytest.raises(ValueError):
        driving_time_hours(100.0, average_speed_kmh=0.0)


@pytest.mark.parametrize("lat", [x * 0.5 for x in range(-180, 181)])
def test_antipodal_points_are_half_circumference(lat):
    d = distance_km(Coordinate(latitude=lat, longitude=0.0), Coordinate(latitude=-lat, longitude=180.0))
    assert d == pytest.approx(EARTH_RADIUS_KM * math.pi, rel=1e-6)
