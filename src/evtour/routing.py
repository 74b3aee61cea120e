"""Visiting-order heuristics for a set of POIs.

:func:`optimize_route` builds the route by repeatedly visiting the nearest
unvisited POI (great-circle distance). It is O(n²) and does not search for
the optimal tour; callers rely on its exact output.

Ties are broken on the POI id string so identical inputs always produce
identical routes regardless of input order.
"""

from __future__ import annotations

from collections.abc import Sequence

from evtour.geo import total_distance
from evtour.models.poi import POI, GeoLocation


def optimize_route(start_location: GeoLocation, pois: Sequence[POI]) -> list[POI]:
    """Order *pois* with the nearest-neighbour heuristic.

    Args:
        start_location: Where the vehicle departs from.
        pois: POIs to visit, in any order.

    Returns:
        A permutation of *pois*, starting with the POI closest to
        *start_location*.
    """
    unvisited = list(pois)
    route: list[POI] = []
    current = start_location
    while unvisited:
        # nearest first, then lowest id
        nearest = min(unvisited, key=lambda poi: (current.distance_to(poi.location), str(poi.id)))
        route.append(nearest)
        unvisited.remove(nearest)
        current = nearest.location
    return route


def calculate_total_distance(start_location: GeoLocation, pois: Sequence[POI]) -> float:
    """Total miles driven from *start_location* through *pois* in order."""
    return total_distance(start_location, (poi.location for poi in pois))


class RouteOptimizer:
    """Object form of the routing helpers, for injection into planners."""

    def optimize_route(self, start_location: GeoLocation, pois: Sequence[POI]) -> list[POI]:
        return optimize_route(start_location, pois)

    def calculate_total_distance(self, start_location: GeoLocation, pois: Sequence[POI]) -> float:
        return calculate_total_distance(start_location, pois)
