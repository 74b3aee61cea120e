"""Tour, waypoint and planning-result models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import Field, model_validator

from evtour.exceptions import TourStateError
from evtour.models._base import EvTourBaseModel, utcnow
from evtour.models.conditions import DrivingConditions
from evtour.models.poi import GeoLocation


class TourStatus(StrEnum):
    DRAFT = "draft"
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_TOUR_TRANSITIONS: dict[TourStatus, frozenset[TourStatus]] = {
    TourStatus.DRAFT: frozenset({TourStatus.PLANNED, TourStatus.CANCELLED}),
    TourStatus.PLANNED: frozenset({TourStatus.ACTIVE, TourStatus.CANCELLED}),
    TourStatus.ACTIVE: frozenset({TourStatus.COMPLETED, TourStatus.CANCELLED}),
    TourStatus.COMPLETED: frozenset(),
    TourStatus.CANCELLED: frozenset(),
}


class Waypoint(EvTourBaseModel):
    """A single stop in a tour: a POI visit or an inserted charging stop."""

    id: UUID = Field(default_factory=uuid4)
    poi_id: UUID | None = None
    location: GeoLocation
    name: str
    notes: str | None = None
    sequence_number: int = Field(ge=0)
    """0-based position in the tour."""
    is_charging_stop: bool = False
    duration_minutes: int = Field(default=0, ge=0)
    """Dwell time at this stop."""
    expected_battery_on_arrival: float | None = None
    """Planner estimate of the battery fraction on arrival."""
    expected_battery_on_departure: float | None = None
    """Planner estimate of the battery fraction on departure."""


class Tour(EvTourBaseModel):
    """An ordered collection of waypoints.

    Sequence numbers always form exactly ``{0, ..., n-1}``; construction
    fails otherwise.
    """

    id: UUID = Field(default_factory=uuid4)
    name: str = "Road trip"
    description: str | None = None
    waypoints: tuple[Waypoint, ...] = ()
    vehicle_id: UUID
    status: TourStatus = TourStatus.DRAFT
    conditions: DrivingConditions = Field(default_factory=DrivingConditions)
    start_location: GeoLocation | None = None
    """Where the vehicle departs from; ``None`` means the first waypoint."""
    total_distance_miles: float = Field(default=0.0, ge=0)
    estimated_duration_minutes: int = Field(default=0, ge=0)
    is_safe_for_vehicle: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def _check_sequence_numbers(self) -> Tour:
        numbers = sorted(w.sequence_number for w in self.waypoints)
        if numbers != list(range(len(self.waypoints))):
            expected = len(self.waypoints) - 1
            raise ValueError(f"waypoint sequence numbers must be 0..{expected} without gaps, got {numbers}")
        return self

    @property
    def ordered_waypoints(self) -> list[Waypoint]:
        return sorted(self.waypoints, key=lambda w: w.sequence_number)

    @property
    def charging_stops(self) -> list[Waypoint]:
        return [w for w in self.ordered_waypoints if w.is_charging_stop]

    @property
    def poi_stops(self) -> list[Waypoint]:
        return [w for w in self.ordered_waypoints if not w.is_charging_stop]

    def transition(self, status: TourStatus) -> Tour:
        """Return a copy moved to *status*, enforcing the tour lifecycle.

        Draft -> planned -> active -> completed; any non-terminal tour can
        be cancelled. Raises :class:`TourStateError` otherwise.
        """
        if status not in _TOUR_TRANSITIONS[self.status]:
            raise TourStateError(f"cannot move tour from {self.status} to {status}")
        return self.model_copy(update={"status": status})


class TourPlanningResult(EvTourBaseModel):
    """Successful outcome of :meth:`TourPlanner.create_tour`."""

    tour: Tour
    was_safe_without_chargers: bool
    chargers_added_count: int = Field(ge=0)
    warnings: tuple[str, ...] = ()

    @property
    def chargers_added(self) -> bool:
        return self.chargers_added_count > 0


class TripUnsafe(EvTourBaseModel):
    """Structured infeasibility report returned instead of a tour.

    The caller is expected to present it (e.g. "add a charging stop
    manually") rather than treat it as an error.
    """

    reason: str
    tour: Tour
    """Best-effort tour including any chargers inserted before giving up."""
    failed_leg_index: int = Field(ge=0)
    """Sequence number of the waypoint that could not be reached."""
    leg_origin: GeoLocation
    leg_destination: GeoLocation
    leg_distance_miles: float = Field(ge=0)
    battery_at_departure: float
    chargers_added_count: int = Field(default=0, ge=0)
