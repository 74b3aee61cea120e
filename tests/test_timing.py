from __future__ import annotations

import math

import pytest
from conftest import make_narration

from evtour.config import TourConfig
from evtour.exceptions import InvalidInputError
from evtour.timing import StandardNarrationTimingCalculator, estimated_time_to_arrival, has_passed_poi


def test_three_minute_story_at_thirty_mph() -> None:
    timing = StandardNarrationTimingCalculator().calculate_timing(make_narration(duration_seconds=180.0), 5.0, 30.0)
    assert timing.narration_travel_distance_miles == pytest.approx(1.5)
    assert timing.trigger_distance_miles == pytest.approx(3.5)
    assert timing.distance_from_poi_on_completion_miles == pytest.approx(3.5)
    assert timing.time_to_trigger_seconds == pytest.approx(180.0)
    assert timing.current_speed_mph == 30.0
    assert timing.is_valid is True


@pytest.mark.parametrize("distance", [0.0, 0.3, 0.6, 2.0, 5.0, 40.0])
@pytest.mark.parametrize("speed", [0.0, 15.0, 65.0])
def test_trigger_distance_bounds(distance: float, speed: float) -> None:
    timing = StandardNarrationTimingCalculator().calculate_timing(make_narration(), distance, speed)
    assert 0.0 <= timing.trigger_distance_miles <= distance
    if distance >= 0.5:
        assert timing.trigger_distance_miles >= 0.5


@pytest.mark.parametrize("distance", [0.0, -0.2, -3.0])
def test_at_or_past_poi_is_invalid_without_raising(distance: float) -> None:
    timing = StandardNarrationTimingCalculator().calculate_timing(make_narration(), distance, 30.0)
    assert timing.trigger_distance_miles == 0.0
    assert timing.time_to_trigger_seconds == 0.0
    assert timing.is_valid is False


def test_trigger_never_closer_than_minimum() -> None:
    # a 3 minute story at 60 mph covers 3 miles, more than is left
    timing = StandardNarrationTimingCalculator().calculate_timing(make_narration(duration_seconds=180.0), 2.0, 60.0)
    assert timing.trigger_distance_miles == 0.5
    assert timing.distance_from_poi_on_completion_miles == pytest.approx(-1.0)
    assert timing.is_valid is False


def test_inside_minimum_distance_is_invalid() -> None:
    timing = StandardNarrationTimingCalculator().calculate_timing(make_narration(duration_seconds=10.0), 0.4, 30.0)
    assert timing.trigger_distance_miles == pytest.approx(0.4)
    assert timing.is_valid is False


def test_stationary_vehicle_never_triggers() -> None:
    timing = StandardNarrationTimingCalculator().calculate_timing(make_narration(), 5.0, 0.0)
    assert math.isinf(timing.time_to_trigger_seconds)
    assert timing.narration_travel_distance_miles == 0.0
    assert timing.is_valid is False


def test_story_ending_too_close_to_arrival_is_invalid() -> None:
    # ends 0.5 miles out at 60 mph: 30 seconds before arrival, window wants 60
    timing = StandardNarrationTimingCalculator().calculate_timing(make_narration(duration_seconds=180.0), 3.5, 60.0)
    assert timing.distance_from_poi_on_completion_miles == pytest.approx(0.5)
    assert timing.is_valid is False


def test_window_lower_bound_is_honoured() -> None:
    calculator = StandardNarrationTimingCalculator()
    narration = make_narration(duration_seconds=180.0)
    assert calculator.calculate_timing(narration, 3.5, 60.0, (20.0, 40.0)).is_valid is True
    assert calculator.calculate_timing(narration, 3.5, 60.0, (45.0, 90.0)).is_valid is False


def test_negative_speed_raises() -> None:
    with pytest.raises(InvalidInputError):
        StandardNarrationTimingCalculator().calculate_timing(make_narration(), 5.0, -1.0)


@pytest.mark.parametrize("window", [(-1.0, 60.0), (120.0, 60.0)])
def test_malformed_window_raises(window: tuple[float, float]) -> None:
    with pytest.raises(InvalidInputError):
        StandardNarrationTimingCalculator().calculate_timing(make_narration(), 5.0, 30.0, window)


def test_negative_minimum_trigger_raises() -> None:
    with pytest.raises(InvalidInputError):
        StandardNarrationTimingCalculator(-0.1)


def test_from_config_uses_minimum_trigger() -> None:
    calculator = StandardNarrationTimingCalculator.from_config(TourConfig(min_trigger_distance_miles=1.0))
    assert calculator.min_trigger_distance_miles == 1.0
    timing = calculator.calculate_timing(make_narration(duration_seconds=60.0), 0.9, 30.0)
    assert timing.is_valid is False


class TestProximityHelpers:
    def test_eta_at_speed(self) -> None:
        assert estimated_time_to_arrival(10.0, 60.0) == pytest.approx(600.0)

    def test_eta_falls_back_to_default_speed(self) -> None:
        assert estimated_time_to_arrival(45.0, None) == pytest.approx(3600.0)

    def test_eta_when_stationary(self) -> None:
        assert math.isinf(estimated_time_to_arrival(1.0, 0.0))

    def test_eta_rejects_negative_input(self) -> None:
        with pytest.raises(InvalidInputError):
            estimated_time_to_arrival(-1.0, 30.0)
        with pytest.raises(InvalidInputError):
            estimated_time_to_arrival(1.0, -30.0)

    def test_passed_poi_after_getting_close(self) -> None:
        assert has_passed_poi(0.4, 0.2) is True

    def test_not_passed_while_approaching(self) -> None:
        assert has_passed_poi(0.2, 0.4) is False

    def test_not_passed_when_moving_away_from_afar(self) -> None:
        assert has_passed_poi(3.0, 2.0) is False
