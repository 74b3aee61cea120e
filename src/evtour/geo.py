"""Great-circle helpers.

Functions accept anything exposing ``latitude``/``longitude`` in degrees
(normally :class:`~evtour.models.poi.GeoLocation`) and return miles or
degrees. All of them are pure.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Protocol

from evtour._constants import EARTH_RADIUS_MILES


class HasCoordinates(Protocol):
    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...


def haversine_miles(a: HasCoordinates, b: HasCoordinates) -> float:
    """Compute the great-circle distance between two coordinates in miles."""
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)
    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_MILES * c


def initial_bearing(a: HasCoordinates, b: HasCoordinates) -> float:
    """Initial compass bearing from *a* towards *b* in degrees ``[0, 360)``."""
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)
    x = math.sin(d_lambda) * math.cos(phi2)
    y = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0


def midpoint(a: HasCoordinates, b: HasCoordinates) -> tuple[float, float]:
    """Great-circle midpoint of *a* and *b* as a ``(lat, lon)`` tuple."""
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    lambda1 = math.radians(a.longitude)
    d_lambda = math.radians(b.longitude - a.longitude)
    bx = math.cos(phi2) * math.cos(d_lambda)
    by = math.cos(phi2) * math.sin(d_lambda)
    phi_m = math.atan2(math.sin(phi1) + math.sin(phi2), math.sqrt((math.cos(phi1) + bx) ** 2 + by**2))
    lambda_m = lambda1 + math.atan2(by, math.cos(phi1) + bx)
    lon = (math.degrees(lambda_m) + 540.0) % 360.0 - 180.0
    return math.degrees(phi_m), lon


def intermediate_point(a: HasCoordinates, b: HasCoordinates, fraction: float) -> tuple[float, float]:
    """Point *fraction* of the way from *a* to *b* along the great circle.

    ``fraction`` 0 gives *a* and 1 gives *b*.
    """
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    lambda1, lambda2 = math.radians(a.longitude), math.radians(b.longitude)
    delta = haversine_miles(a, b) / EARTH_RADIUS_MILES
    if delta == 0:
        return a.latitude, a.longitude
    wa = math.sin((1 - fraction) * delta) / math.sin(delta)
    wb = math.sin(fraction * delta) / math.sin(delta)
    x = wa * math.cos(phi1) * math.cos(lambda1) + wb * math.cos(phi2) * math.cos(lambda2)
    y = wa * math.cos(phi1) * math.sin(lambda1) + wb * math.cos(phi2) * math.sin(lambda2)
    z = wa * math.sin(phi1) + wb * math.sin(phi2)
    return math.degrees(math.atan2(z, math.hypot(x, y))), math.degrees(math.atan2(y, x))


def total_distance(start: HasCoordinates, points: Iterable[HasCoordinates]) -> float:
    """Length in miles of the path ``start -> points[0] -> points[1] ...``."""
    total = 0.0
    current = start
    for point in points:
        total += haversine_miles(current, point)
        current = point
    return total
