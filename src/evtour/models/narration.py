"""Narration and narration-timing models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import Field

from evtour.models._base import EvTourBaseModel, utcnow


class NarrationStatus(StrEnum):
    QUEUED = "queued"
    PLAYING = "playing"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {
        NarrationStatus.COMPLETED,
        NarrationStatus.SKIPPED,
        NarrationStatus.CANCELLED,
        NarrationStatus.FAILED,
    }
)


class Narration(EvTourBaseModel):
    """A spoken story about a POI.

    Produced by a content generator, then owned by a
    :class:`~evtour.narration_queue.NarrationQueue` which is the only place
    its status changes.
    """

    id: UUID = Field(default_factory=uuid4)
    poi_id: UUID
    poi_name: str
    title: str
    content: str
    duration_seconds: float = Field(ge=0)
    """Estimated speaking duration."""
    generated_at: datetime = Field(default_factory=utcnow)
    status: NarrationStatus = NarrationStatus.QUEUED
    started_at: datetime | None = None
    completed_at: datetime | None = None
    source: str = "generated"
    """Label of the content generator that produced the text."""

    @property
    def word_count(self) -> int:
        return len(self.content.split())


class NarrationTiming(EvTourBaseModel):
    """When to start a narration, derived from the current speed and distance.

    Not persisted; recomputed on every location/speed update.
    """

    trigger_distance_miles: float
    """Distance from the POI at which the narration should start."""
    current_speed_mph: float
    time_to_trigger_seconds: float
    """Seconds until the trigger point at the current speed (``inf`` when stopped)."""
    narration_travel_distance_miles: float
    """Distance covered while the narration plays."""
    distance_from_poi_on_completion_miles: float
    """Distance left to the POI if the narration started now."""
    is_valid: bool
    """``False`` means "do not trigger now"."""
