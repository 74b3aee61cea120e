from __future__ import annotations

import pytest

from evtour.geo import haversine_miles, initial_bearing, intermediate_point, midpoint, total_distance
from evtour.models import GeoLocation

_MILES_PER_DEGREE = 3958.8 * 3.141592653589793 / 180.0


def _loc(latitude: float, longitude: float) -> GeoLocation:
    return GeoLocation(latitude=latitude, longitude=longitude)


def test_distance_to_self_is_zero() -> None:
    point = _loc(44.43, -110.59)
    assert haversine_miles(point, point) == 0.0


def test_one_degree_of_latitude() -> None:
    assert haversine_miles(_loc(40.0, 0.0), _loc(41.0, 0.0)) == pytest.approx(_MILES_PER_DEGREE)


def test_distance_is_symmetric() -> None:
    a, b = _loc(37.77, -122.42), _loc(34.05, -118.24)
    assert haversine_miles(a, b) == pytest.approx(haversine_miles(b, a))
    # San Francisco to Los Angeles
    assert haversine_miles(a, b) == pytest.approx(347.0, rel=0.01)


def test_geolocation_distance_to_uses_haversine() -> None:
    a, b = _loc(10.0, 10.0), _loc(11.0, 11.0)
    assert a.distance_to(b) == haversine_miles(a, b)


@pytest.mark.parametrize(
    ("target", "bearing"),
    [((1.0, 0.0), 0.0), ((0.0, 1.0), 90.0), ((-1.0, 0.0), 180.0), ((0.0, -1.0), 270.0)],
)
def test_initial_bearing_cardinal_directions(target: tuple[float, float], bearing: float) -> None:
    assert initial_bearing(_loc(0.0, 0.0), _loc(*target)) == pytest.approx(bearing)


def test_midpoint_on_meridian() -> None:
    lat, lon = midpoint(_loc(41.5, 0.0), _loc(43.0, 0.0))
    assert lat == pytest.approx(42.25)
    assert lon == pytest.approx(0.0)


def test_midpoint_is_equidistant() -> None:
    a, b = _loc(47.6, -122.3), _loc(45.5, -122.7)
    mid = a.midpoint_to(b)
    assert haversine_miles(a, mid) == pytest.approx(haversine_miles(mid, b), rel=1e-6)


def test_total_distance_sums_legs() -> None:
    start = _loc(40.0, 0.0)
    points = [_loc(41.0, 0.0), _loc(42.0, 0.0)]
    assert total_distance(start, points) == pytest.approx(2 * _MILES_PER_DEGREE)
    assert total_distance(start, []) == 0.0


def test_intermediate_point_endpoints_and_fraction() -> None:
    a, b = _loc(40.0, 0.0), _loc(44.0, 0.0)
    assert a.interpolate_to(b, 0.0).latitude == pytest.approx(40.0)
    assert a.interpolate_to(b, 1.0).latitude == pytest.approx(44.0)
    quarter = a.interpolate_to(b, 0.25)
    assert quarter.latitude == pytest.approx(41.0)
    assert quarter.longitude == pytest.approx(0.0, abs=1e-9)


def test_intermediate_point_matches_midpoint() -> None:
    a, b = _loc(47.6, -122.3), _loc(45.5, -118.7)
    lat, lon = intermediate_point(a, b, 0.5)
    mid_lat, mid_lon = midpoint(a, b)
    assert lat == pytest.approx(mid_lat)
    assert lon == pytest.approx(mid_lon)


def test_intermediate_point_of_same_location() -> None:
    point = _loc(10.0, 20.0)
    assert intermediate_point(point, point, 0.7) == (10.0, 20.0)
