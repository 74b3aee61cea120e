"""Planner and narration configuration for evtour."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from evtour._constants import DEFAULT_SAFETY_BUFFER, DEFAULT_WORDS_PER_MINUTE, MIN_TRIGGER_DISTANCE_MILES
from evtour.exceptions import ConfigError


def _env_number(value: str | None, cast: type[int] | type[float], name: str) -> int | float | None:
    if value is None:
        return None
    normalized = value.strip()
    if not normalized:
        return None
    try:
        return cast(normalized)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class TourConfig:
    """Tunable constants for tour planning and narration timing.

    Parameters
    ----------
    safety_buffer_percent : float
        Extra battery fraction reserved on top of the physics requirement
        (``0.15`` reserves 15% more than the raw estimate).
    charge_target_percent : float
        Battery fraction assumed after a charging stop.
    charger_search_radius_miles : float
        Initial radius of a charger search around an unsafe leg.
    max_charger_search_radius_miles : float
        Radius cap. The search radius grows by ``charger_search_growth``
        until this cap is reached, after which the trip is reported unsafe.
    charger_search_growth : float
        Multiplier applied to the radius when a search finds nothing.
    max_charging_stops : int
        Maximum number of chargers inserted into one tour.
    poi_visit_minutes : int
        Dwell time assigned to POI waypoints.
    charging_stop_minutes : int
        Dwell time assigned to charging waypoints.
    min_trigger_distance_miles : float
        Narrations never trigger closer to their POI than this.
    words_per_minute : float
        Speaking rate used to derive narration durations from text.
    """

    safety_buffer_percent: float = DEFAULT_SAFETY_BUFFER
    charge_target_percent: float = 1.0
    charger_search_radius_miles: float = 25.0
    max_charger_search_radius_miles: float = 100.0
    charger_search_growth: float = 2.0
    max_charging_stops: int = 10
    poi_visit_minutes: int = 60
    charging_stop_minutes: int = 30
    min_trigger_distance_miles: float = MIN_TRIGGER_DISTANCE_MILES
    words_per_minute: float = DEFAULT_WORDS_PER_MINUTE

    def __post_init__(self) -> None:
        if self.safety_buffer_percent < 0:
            raise ConfigError("safety_buffer_percent must be >= 0")
        if not 0 < self.charge_target_percent <= 1:
            raise ConfigError("charge_target_percent must be in (0, 1]")
        if self.charger_search_radius_miles <= 0:
            raise ConfigError("charger_search_radius_miles must be > 0")
        if self.max_charger_search_radius_miles < self.charger_search_radius_miles:
            raise ConfigError("max_charger_search_radius_miles must be >= charger_search_radius_miles")
        if self.charger_search_growth <= 1:
            raise ConfigError("charger_search_growth must be > 1")
        if self.max_charging_stops < 0:
            raise ConfigError("max_charging_stops must be >= 0")
        if self.poi_visit_minutes < 0 or self.charging_stop_minutes < 0:
            raise ConfigError("dwell minutes must be >= 0")
        if self.min_trigger_distance_miles < 0:
            raise ConfigError("min_trigger_distance_miles must be >= 0")
        if self.words_per_minute <= 0:
            raise ConfigError("words_per_minute must be > 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> TourConfig:
        """Create configuration from environment variables.

        Reads optional ``EVTOUR_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        TourConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_FLOAT_MAP = {
            "EVTOUR_SAFETY_BUFFER": "safety_buffer_percent",
            "EVTOUR_CHARGE_TARGET": "charge_target_percent",
            "EVTOUR_CHARGER_SEARCH_RADIUS": "charger_search_radius_miles",
            "EVTOUR_MAX_CHARGER_SEARCH_RADIUS": "max_charger_search_radius_miles",
            "EVTOUR_CHARGER_SEARCH_GROWTH": "charger_search_growth",
            "EVTOUR_MIN_TRIGGER_DISTANCE": "min_trigger_distance_miles",
            "EVTOUR_WORDS_PER_MINUTE": "words_per_minute",
        }
        _ENV_INT_MAP = {
            "EVTOUR_MAX_CHARGING_STOPS": "max_charging_stops",
            "EVTOUR_POI_VISIT_MINUTES": "poi_visit_minutes",
            "EVTOUR_CHARGING_STOP_MINUTES": "charging_stop_minutes",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = _env_number(env.get(env_key), float, env_key)
            if val is not None:
                config_kwargs[field_name] = val
        for env_key, field_name in _ENV_INT_MAP.items():
            val = _env_number(env.get(env_key), int, env_key)
            if val is not None:
                config_kwargs[field_name] = val

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
