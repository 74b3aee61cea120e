"""Narration trigger timing.

A narration of ``d`` seconds played at ``v`` mph covers ``v * d / 3600``
miles. The calculator places the trigger that much closer than the current
distance, but never closer to the POI than a fixed minimum, and reports
whether starting the narration makes sense at all. Callers re-run it on
every location/speed sample; nothing is cached.
"""

from __future__ import annotations

import math
from typing import Protocol

from evtour._constants import (
    DEFAULT_ARRIVAL_WINDOW_SECONDS,
    DEFAULT_SPEED_MPH,
    MIN_TRIGGER_DISTANCE_MILES,
    PASSED_POI_THRESHOLD_MILES,
    SECONDS_PER_HOUR,
)
from evtour.config import TourConfig
from evtour.exceptions import InvalidInputError
from evtour.models.narration import Narration, NarrationTiming


class NarrationTimingCalculator(Protocol):
    def calculate_timing(
        self,
        narration: Narration,
        distance_from_poi_miles: float,
        current_speed_mph: float,
        target_arrival_window_seconds: tuple[float, float] = ...,
    ) -> NarrationTiming: ...


def _check_window(window: tuple[float, float]) -> tuple[float, float]:
    low, high = window
    if low < 0 or high < 0 or low > high:
        raise InvalidInputError(f"target_arrival_window_seconds must be an ordered non-negative range, got {window}")
    return float(low), float(high)


class StandardNarrationTimingCalculator:
    """Stateless timing calculator.

    Parameters
    ----------
    min_trigger_distance_miles : float
        Narrations never start closer to the POI than this.
    """

    def __init__(self, min_trigger_distance_miles: float = MIN_TRIGGER_DISTANCE_MILES) -> None:
        if min_trigger_distance_miles < 0:
            raise InvalidInputError("min_trigger_distance_miles must be >= 0")
        self._min_trigger = min_trigger_distance_miles

    @classmethod
    def from_config(cls, config: TourConfig) -> StandardNarrationTimingCalculator:
        return cls(config.min_trigger_distance_miles)

    @property
    def min_trigger_distance_miles(self) -> float:
        return self._min_trigger

    def calculate_timing(
        self,
        narration: Narration,
        distance_from_poi_miles: float,
        current_speed_mph: float,
        target_arrival_window_seconds: tuple[float, float] = DEFAULT_ARRIVAL_WINDOW_SECONDS,
    ) -> NarrationTiming:
        """Compute where and when *narration* should start.

        A stationary vehicle or one already at (or past) the POI gets an
        invalid timing, which means "do not trigger now" rather than an
        error. Negative speeds and malformed windows raise
        :class:`InvalidInputError`.

        The timing is valid when the vehicle is moving, is farther than the
        minimum trigger distance, and a narration started now would end
        before the POI with at least the window's lower bound left, i.e. no
        later than the latest finish the window allows.
        """
        if current_speed_mph < 0:
            raise InvalidInputError(f"current_speed_mph must be >= 0, got {current_speed_mph}")
        window_low, _ = _check_window(target_arrival_window_seconds)

        distance = distance_from_poi_miles
        speed = current_speed_mph
        travel = speed * narration.duration_seconds / SECONDS_PER_HOUR

        upper = max(distance, 0.0)
        trigger = min(max(distance - travel, self._min_trigger), upper)

        if speed > 0:
            time_to_trigger = max(distance - trigger, 0.0) / speed * SECONDS_PER_HOUR
        else:
            time_to_trigger = math.inf

        remaining_on_completion = distance - travel
        is_valid = speed > 0 and distance > self._min_trigger and remaining_on_completion >= 0
        if is_valid:
            gap_seconds = remaining_on_completion / speed * SECONDS_PER_HOUR
            is_valid = gap_seconds >= window_low

        return NarrationTiming(
            trigger_distance_miles=trigger,
            current_speed_mph=speed,
            time_to_trigger_seconds=time_to_trigger,
            narration_travel_distance_miles=travel,
            distance_from_poi_on_completion_miles=remaining_on_completion,
            is_valid=is_valid,
        )


def estimated_time_to_arrival(
    distance_miles: float,
    speed_mph: float | None,
    default_speed_mph: float = DEFAULT_SPEED_MPH,
) -> float:
    """Seconds to cover *distance_miles*; ``inf`` when stationary.

    ``None`` speed (no GPS fix yet) falls back to *default_speed_mph*.
    """
    if distance_miles < 0:
        raise InvalidInputError(f"distance_miles must be >= 0, got {distance_miles}")
    speed = default_speed_mph if speed_mph is None else speed_mph
    if speed < 0:
        raise InvalidInputError(f"speed_mph must be >= 0, got {speed}")
    if speed == 0:
        return math.inf
    return distance_miles / speed * SECONDS_PER_HOUR


def has_passed_poi(
    current_distance_miles: float,
    previous_distance_miles: float,
    threshold_miles: float = PASSED_POI_THRESHOLD_MILES,
) -> bool:
    """Whether the vehicle drove past the POI.

    True once the distance starts growing again after having been within
    *threshold_miles*.
    """
    return current_distance_miles > previous_distance_miles and previous_distance_miles < threshold_miles
