"""Battery-to-distance conversion under driving conditions.

The model starts from the EPA-rated range and scales it by a condition
multiplier made of two capped penalties:

* temperature: 1% per °F below 70 °F, capped at 60%;
* elevation: 2% per 1000 ft of net climb, capped at 50%.

A cold soak (hours parked in the cold before departure) costs a fixed
1.5 kWh per hour, converted to miles with the vehicle's consumption rate
and deducted from the estimate.

Every function here is pure and safe to call from any thread.
"""

from __future__ import annotations

from typing import Protocol

from evtour._constants import (
    COLD_SOAK_KWH_PER_HOUR,
    DEFAULT_SAFETY_BUFFER,
    ELEVATION_PENALTY_PER_1000_FT,
    MAX_ELEVATION_PENALTY,
    MAX_TEMPERATURE_PENALTY,
    REFERENCE_TEMPERATURE_F,
    TEMPERATURE_PENALTY_PER_DEGREE,
)
from evtour.exceptions import InvalidInputError
from evtour.models.conditions import DrivingConditions
from evtour.models.vehicle import Vehicle


class RangeEstimator(Protocol):
    """Contract for range estimation.

    Battery levels are fractions in ``[0, 1]``; distances are miles.
    """

    def estimate_range(self, vehicle: Vehicle, battery_percent: float, conditions: DrivingConditions) -> float: ...

    def battery_used_for_trip(self, vehicle: Vehicle, distance_miles: float, conditions: DrivingConditions) -> float:
        """Battery fraction the trip consumes, without any safety buffer."""
        ...

    def required_battery_for_trip(
        self,
        vehicle: Vehicle,
        distance_miles: float,
        conditions: DrivingConditions,
    ) -> float:
        """Battery fraction to reserve for the trip, buffer included."""
        ...

    def is_trip_safe(
        self,
        vehicle: Vehicle,
        battery_percent: float,
        distance_miles: float,
        conditions: DrivingConditions,
    ) -> bool: ...


def check_battery_percent(battery_percent: float, name: str = "battery_percent") -> None:
    """Raise :class:`InvalidInputError` unless *battery_percent* is within ``[0, 1]``."""
    if not 0.0 <= battery_percent <= 1.0:
        raise InvalidInputError(f"{name} must be within [0, 1], got {battery_percent}")


def _check_distance(distance_miles: float) -> None:
    if distance_miles < 0:
        raise InvalidInputError(f"distance_miles must be >= 0, got {distance_miles}")


def temperature_penalty(temperature_f: float) -> float:
    """Fraction of range lost to cold, ``0`` at or above the reference."""
    if temperature_f >= REFERENCE_TEMPERATURE_F:
        return 0.0
    penalty = (REFERENCE_TEMPERATURE_F - temperature_f) * TEMPERATURE_PENALTY_PER_DEGREE
    return min(penalty, MAX_TEMPERATURE_PENALTY)


def elevation_penalty(elevation_change_feet: float) -> float:
    """Fraction of range lost to net climbing; descents cost nothing."""
    climb = max(elevation_change_feet, 0.0)
    return min(climb / 1000.0 * ELEVATION_PENALTY_PER_1000_FT, MAX_ELEVATION_PENALTY)


def condition_multiplier(conditions: DrivingConditions) -> float:
    """Scale factor in ``(0, 1]`` applied to the base range."""
    return (1.0 - temperature_penalty(conditions.temperature_f)) * (
        1.0 - elevation_penalty(conditions.elevation_change_feet)
    )


def cold_soak_miles(vehicle: Vehicle, conditions: DrivingConditions) -> float:
    """Range in miles lost to battery conditioning after a cold soak."""
    if not conditions.has_cold_soak:
        return 0.0
    assert conditions.cold_soak_hours is not None  # noqa: S101
    energy_lost_kwh = conditions.cold_soak_hours * COLD_SOAK_KWH_PER_HOUR
    return energy_lost_kwh / vehicle.consumption_kwh_per_mile


class SimpleRangeEstimator:
    """EPA-rating based estimator with condition adjustments.

    Parameters
    ----------
    safety_buffer_percent : float
        Reserve applied multiplicatively on top of the physics requirement.
        ``0.15`` means the trip must be covered with 15% to spare.
    """

    def __init__(self, safety_buffer_percent: float = DEFAULT_SAFETY_BUFFER) -> None:
        if safety_buffer_percent < 0:
            raise InvalidInputError(f"safety_buffer_percent must be >= 0, got {safety_buffer_percent}")
        self._safety_buffer_percent = safety_buffer_percent

    @property
    def safety_buffer_percent(self) -> float:
        return self._safety_buffer_percent

    def __repr__(self) -> str:
        return f"{type(self).__name__}(safety_buffer_percent={self._safety_buffer_percent!r})"

    def estimate_range(self, vehicle: Vehicle, battery_percent: float, conditions: DrivingConditions) -> float:
        """Estimated remaining range in miles."""
        check_battery_percent(battery_percent)
        base_range = vehicle.epa_range_miles * battery_percent
        adjusted = base_range * condition_multiplier(conditions) - cold_soak_miles(vehicle, conditions)
        return max(adjusted, 0.0)

    def battery_used_for_trip(self, vehicle: Vehicle, distance_miles: float, conditions: DrivingConditions) -> float:
        """Invert :meth:`estimate_range` for *distance_miles*."""
        _check_distance(distance_miles)
        if distance_miles == 0:
            return 0.0
        effective_range = vehicle.epa_range_miles * condition_multiplier(conditions)
        return (distance_miles + cold_soak_miles(vehicle, conditions)) / effective_range

    def required_battery_for_trip(
        self,
        vehicle: Vehicle,
        distance_miles: float,
        conditions: DrivingConditions,
    ) -> float:
        """Battery fraction to reserve for the trip, buffer included.

        Values above ``1.0`` are not clamped: they mean the distance cannot
        be covered safely even on a full battery.
        """
        used = self.battery_used_for_trip(vehicle, distance_miles, conditions)
        return used * (1.0 + self._safety_buffer_percent)

    def is_trip_safe(
        self,
        vehicle: Vehicle,
        battery_percent: float,
        distance_miles: float,
        conditions: DrivingConditions,
    ) -> bool:
        check_battery_percent(battery_percent)
        return battery_percent >= self.required_battery_for_trip(vehicle, distance_miles, conditions)
