"""Driving conditions model."""

from __future__ import annotations

from pydantic import Field

from evtour._constants import REFERENCE_TEMPERATURE_F
from evtour.models._base import EvTourBaseModel


class DrivingConditions(EvTourBaseModel):
    """Environmental and driving conditions affecting range.

    A value type created per calculation and never mutated.
    """

    temperature_f: float = REFERENCE_TEMPERATURE_F
    """Ambient temperature in Fahrenheit."""
    cold_soak_hours: float | None = Field(default=None, ge=0)
    """Hours parked in the cold before departure, if any."""
    elevation_change_feet: float = 0.0
    """Net elevation change over the trip; positive means climbing."""
    average_speed_mph: float = Field(default=55.0, ge=0)
    """Expected average speed."""

    @classmethod
    def standard(cls) -> DrivingConditions:
        """Reference conditions for baseline calculations."""
        return cls()

    @property
    def has_cold_soak(self) -> bool:
        return self.cold_soak_hours is not None and self.cold_soak_hours > 0

    def without_cold_soak(self) -> DrivingConditions:
        """Same conditions once the battery has warmed up."""
        if self.cold_soak_hours is None:
            return self
        return self.model_copy(update={"cold_soak_hours": None})
