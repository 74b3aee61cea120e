"""Tour assembly with automatic charging-stop insertion.

The planner orders POIs with the nearest-neighbour heuristic, then walks
the legs of the tour tracking battery depletion. On the first leg that
fails :meth:`RangeEstimator.is_trip_safe` it asks the POI lookup for
chargers around the farthest point of that leg the battery can safely
reach, inserts the usable one closest to it,
renumbers the waypoints and walks again from the start. The search radius
grows geometrically up to a cap and the number of inserted chargers is
bounded; when either bound is exhausted the planner returns a
:class:`~evtour.models.tour.TripUnsafe` report instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from evtour.config import TourConfig
from evtour.exceptions import NoRouteFoundError
from evtour.geo import total_distance
from evtour.models.conditions import DrivingConditions
from evtour.models.poi import POI, GeoLocation, POICategory
from evtour.models.tour import Tour, TourPlanningResult, TourStatus, TripUnsafe, Waypoint
from evtour.models.vehicle import Vehicle
from evtour.poi_lookup import POILookup
from evtour.range_estimation import RangeEstimator, SimpleRangeEstimator, check_battery_percent
from evtour.routing import RouteOptimizer

_logger = logging.getLogger(__name__)

_CHARGER_CATEGORIES = frozenset({POICategory.EV_CHARGER})
_REACH_ITERATIONS = 40


class TourPlanner(Protocol):
    async def create_tour(
        self,
        pois: Sequence[POI],
        vehicle: Vehicle,
        starting_battery_percent: float,
        conditions: DrivingConditions,
        poi_lookup: POILookup,
        *,
        name: str = ...,
        start_location: GeoLocation | None = ...,
    ) -> TourPlanningResult | TripUnsafe: ...

    def validate_tour_safety(
        self,
        tour: Tour,
        vehicle: Vehicle,
        starting_battery_percent: float,
        conditions: DrivingConditions,
    ) -> bool: ...


@dataclass(slots=True)
class _Walk:
    """Outcome of walking a tour leg by leg.

    ``failed_index`` is the position of the first unreachable waypoint, or
    ``None`` when every leg is safe. The ``leg_*`` fields describe that
    failing leg.
    """

    failed_index: int | None = None
    leg_origin: GeoLocation | None = None
    leg_destination: GeoLocation | None = None
    leg_distance: float = 0.0
    leg_conditions: DrivingConditions | None = None
    battery_at_departure: float = 0.0
    arrivals: list[float] = field(default_factory=list)
    departures: list[float] = field(default_factory=list)

    @property
    def safe(self) -> bool:
        return self.failed_index is None


def _renumber(waypoints: Sequence[Waypoint]) -> list[Waypoint]:
    return [
        w if w.sequence_number == i else w.model_copy(update={"sequence_number": i}) for i, w in enumerate(waypoints)
    ]


class StandardTourPlanner:
    """Builds tours that a vehicle can complete without running flat.

    Parameters
    ----------
    range_estimator : RangeEstimator or None
        Estimator used for every leg check. Defaults to a
        :class:`SimpleRangeEstimator` with the configured safety buffer.
    config : TourConfig or None
        Search bounds, charge target and dwell times.
    route_optimizer : RouteOptimizer or None
        Orders POIs before charger insertion.
    """

    def __init__(
        self,
        range_estimator: RangeEstimator | None = None,
        *,
        config: TourConfig | None = None,
        route_optimizer: RouteOptimizer | None = None,
    ) -> None:
        self._config = config or TourConfig()
        self._estimator: RangeEstimator = range_estimator or SimpleRangeEstimator(self._config.safety_buffer_percent)
        self._optimizer = route_optimizer or RouteOptimizer()

    @property
    def config(self) -> TourConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def create_tour(
        self,
        pois: Sequence[POI],
        vehicle: Vehicle,
        starting_battery_percent: float,
        conditions: DrivingConditions,
        poi_lookup: POILookup,
        *,
        name: str = "Road trip",
        start_location: GeoLocation | None = None,
    ) -> TourPlanningResult | TripUnsafe:
        """Order *pois* into a draft tour and make it safe for *vehicle*.

        Raises :class:`NoRouteFoundError` for an empty POI set and
        :class:`InvalidInputError` for a battery level outside ``[0, 1]``.
        Infeasible trips are returned as :class:`TripUnsafe`.
        """
        if not pois:
            raise NoRouteFoundError("cannot plan a tour without points of interest")
        check_battery_percent(starting_battery_percent, "starting_battery_percent")

        origin = start_location if start_location is not None else pois[0].location
        ordered = self._optimizer.optimize_route(origin, pois)
        waypoints = [self._poi_waypoint(poi, index) for index, poi in enumerate(ordered)]
        tour = Tour(
            name=name,
            waypoints=tuple(waypoints),
            vehicle_id=vehicle.id,
            conditions=conditions,
            start_location=start_location,
        )
        return await self.add_charging_stops(tour, vehicle, starting_battery_percent, conditions, poi_lookup)

    async def add_charging_stops(
        self,
        tour: Tour,
        vehicle: Vehicle,
        starting_battery_percent: float,
        conditions: DrivingConditions,
        poi_lookup: POILookup,
    ) -> TourPlanningResult | TripUnsafe:
        """Insert chargers into *tour* (kept in its current order) until it is safe.

        Useful to repair a tour after manual edits. Waypoint order is never
        changed apart from the inserted charging stops.
        """
        check_battery_percent(starting_battery_percent, "starting_battery_percent")
        waypoints = list(tour.ordered_waypoints)
        start = tour.start_location

        walk = self._walk(waypoints, start, vehicle, starting_battery_percent, conditions)
        was_safe = walk.safe
        inserted = 0

        while not walk.safe:
            assert walk.failed_index is not None  # noqa: S101
            if inserted >= self._config.max_charging_stops:
                reason = f"charging stop limit of {self._config.max_charging_stops} reached"
                return self._unsafe(tour, waypoints, conditions, walk, inserted, reason)

            used_poi_ids = {w.poi_id for w in waypoints if w.poi_id is not None}
            charger = await self._find_charger(walk, vehicle, used_poi_ids, poi_lookup)
            if charger is None:
                reason = (
                    f"no compatible charger reachable within {self._config.max_charger_search_radius_miles:g} miles "
                    f"of the leg to {waypoints[walk.failed_index].name}"
                )
                return self._unsafe(tour, waypoints, conditions, walk, inserted, reason)

            _logger.debug(
                "Inserting charger %s before waypoint %d (%s)",
                charger.name,
                walk.failed_index,
                waypoints[walk.failed_index].name,
            )
            waypoints.insert(walk.failed_index, self._charging_waypoint(charger, walk.failed_index))
            waypoints = _renumber(waypoints)
            inserted += 1
            walk = self._walk(waypoints, start, vehicle, starting_battery_percent, conditions)

        annotated = [
            w.model_copy(
                update={
                    "expected_battery_on_arrival": round(arrival, 4),
                    "expected_battery_on_departure": round(departure, 4),
                }
            )
            for w, arrival, departure in zip(waypoints, walk.arrivals, walk.departures, strict=True)
        ]
        planned = self._build_tour(tour, annotated, conditions, is_safe=True)

        warnings: list[str] = []
        if inserted:
            warnings.append(f"{inserted} charging stop(s) added to complete the trip")
        return TourPlanningResult(
            tour=planned,
            was_safe_without_chargers=was_safe,
            chargers_added_count=inserted,
            warnings=tuple(warnings),
        )

    def validate_tour_safety(
        self,
        tour: Tour,
        vehicle: Vehicle,
        starting_battery_percent: float,
        conditions: DrivingConditions,
    ) -> bool:
        """Whether every leg of *tour* is safe, charging stops included."""
        check_battery_percent(starting_battery_percent, "starting_battery_percent")
        walk = self._walk(tour.ordered_waypoints, tour.start_location, vehicle, starting_battery_percent, conditions)
        return walk.safe

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _walk(
        self,
        waypoints: Sequence[Waypoint],
        start: GeoLocation | None,
        vehicle: Vehicle,
        battery: float,
        conditions: DrivingConditions,
    ) -> _Walk:
        result = _Walk()
        if not waypoints:
            return result
        position = start if start is not None else waypoints[0].location
        leg_conditions = conditions

        for index, waypoint in enumerate(waypoints):
            distance = position.distance_to(waypoint.location)
            if not self._estimator.is_trip_safe(vehicle, battery, distance, leg_conditions):
                result.failed_index = index
                result.leg_origin = position
                result.leg_destination = waypoint.location
                result.leg_distance = distance
                result.leg_conditions = leg_conditions
                result.battery_at_departure = battery
                return result

            used = self._estimator.battery_used_for_trip(vehicle, distance, leg_conditions)
            battery = max(battery - used, 0.0)
            if distance > 0:
                # The cold-soak penalty is paid once, on the first real leg.
                leg_conditions = conditions.without_cold_soak()
            result.arrivals.append(battery)
            if waypoint.is_charging_stop:
                battery = max(battery, self._config.charge_target_percent)
            result.departures.append(battery)
            position = waypoint.location
        return result

    async def _find_charger(
        self,
        walk: _Walk,
        vehicle: Vehicle,
        used_poi_ids: set[UUID],
        poi_lookup: POILookup,
    ) -> POI | None:
        assert walk.leg_origin is not None and walk.leg_destination is not None  # noqa: S101
        assert walk.leg_conditions is not None  # noqa: S101
        origin = walk.leg_origin
        reach = self._safe_reach(vehicle, walk.battery_at_departure, walk.leg_distance, walk.leg_conditions)
        fraction = reach / walk.leg_distance if walk.leg_distance > 0 else 0.0
        center = origin.interpolate_to(walk.leg_destination, fraction)
        _logger.debug("Searching chargers around %.1f of %.1f miles along the leg", reach, walk.leg_distance)
        radius = self._config.charger_search_radius_miles
        cap = self._config.max_charger_search_radius_miles

        while True:
            candidates = await poi_lookup.find_nearby(center, radius, _CHARGER_CATEGORIES)
            usable = [
                poi
                for poi in candidates
                if poi.is_charger
                and poi.id not in used_poi_ids
                and vehicle.supports_any(poi.charging_ports)
                and self._estimator.is_trip_safe(
                    vehicle,
                    walk.battery_at_departure,
                    origin.distance_to(poi.location),
                    walk.leg_conditions,
                )
            ]
            if usable:
                return min(usable, key=lambda poi: (poi.distance_to(center), str(poi.id)))
            if radius >= cap:
                return None
            radius = min(radius * self._config.charger_search_growth, cap)
            _logger.debug("No usable charger found, expanding search radius to %.1f miles", radius)

    def _safe_reach(
        self,
        vehicle: Vehicle,
        battery: float,
        max_distance: float,
        conditions: DrivingConditions,
    ) -> float:
        """Longest distance up to *max_distance* that is safe on *battery*.

        Bisects on :meth:`RangeEstimator.is_trip_safe`, so it works for any
        estimator whose safety is monotonic in distance.
        """
        low, high = 0.0, max_distance
        for _ in range(_REACH_ITERATIONS):
            mid = (low + high) / 2
            if self._estimator.is_trip_safe(vehicle, battery, mid, conditions):
                low = mid
            else:
                high = mid
        return low

    def _poi_waypoint(self, poi: POI, sequence_number: int) -> Waypoint:
        return Waypoint(
            poi_id=poi.id,
            location=poi.location,
            name=poi.name,
            notes=poi.description,
            sequence_number=sequence_number,
            is_charging_stop=poi.is_charger,
            duration_minutes=self._config.charging_stop_minutes if poi.is_charger else self._config.poi_visit_minutes,
        )

    def _charging_waypoint(self, charger: POI, sequence_number: int) -> Waypoint:
        return Waypoint(
            poi_id=charger.id,
            location=charger.location,
            name=charger.name,
            notes="Charging stop",
            sequence_number=sequence_number,
            is_charging_stop=True,
            duration_minutes=self._config.charging_stop_minutes,
        )

    def _build_tour(
        self,
        base: Tour,
        waypoints: Sequence[Waypoint],
        conditions: DrivingConditions,
        *,
        is_safe: bool,
    ) -> Tour:
        distance = 0.0
        if waypoints:
            start = base.start_location if base.start_location is not None else waypoints[0].location
            distance = total_distance(start, (w.location for w in waypoints))
        driving_minutes = 0
        if conditions.average_speed_mph > 0:
            driving_minutes = round(distance / conditions.average_speed_mph * 60)
        return base.evolve(
            waypoints=tuple(waypoints),
            status=TourStatus.DRAFT,
            conditions=conditions,
            total_distance_miles=distance,
            estimated_duration_minutes=driving_minutes + sum(w.duration_minutes for w in waypoints),
            is_safe_for_vehicle=is_safe,
        )

    def _unsafe(
        self,
        tour: Tour,
        waypoints: Sequence[Waypoint],
        conditions: DrivingConditions,
        walk: _Walk,
        inserted: int,
        reason: str,
    ) -> TripUnsafe:
        assert walk.failed_index is not None  # noqa: S101
        assert walk.leg_origin is not None and walk.leg_destination is not None  # noqa: S101
        _logger.debug("Trip unsafe at waypoint %d: %s", walk.failed_index, reason)
        return TripUnsafe(
            reason=reason,
            tour=self._build_tour(tour, waypoints, conditions, is_safe=False),
            failed_leg_index=walk.failed_index,
            leg_origin=walk.leg_origin,
            leg_destination=walk.leg_destination,
            leg_distance_miles=walk.leg_distance,
            battery_at_departure=walk.battery_at_departure,
            chargers_added_count=inserted,
        )
