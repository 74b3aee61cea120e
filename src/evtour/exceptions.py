"""Custom exception hierarchy for evtour."""

from __future__ import annotations

from uuid import UUID


class EvTourError(Exception):
    """Base exception for all evtour errors."""


class ConfigError(EvTourError):
    """Invalid configuration value."""


class InvalidInputError(EvTourError, ValueError):
    """Out-of-range numeric input (battery fraction, distance, speed).

    Raised at the call site; values are never silently clamped.
    """


class NoRouteFoundError(EvTourError):
    """A tour was requested for an empty set of points of interest."""


class TourStateError(EvTourError):
    """Illegal tour lifecycle transition."""


class NarrationStateError(EvTourError):
    """Illegal narration status transition.

    Raised by :class:`~evtour.narration_queue.NarrationQueue` when a
    transition would break the queue lifecycle, e.g. a second entry
    entering ``playing`` while another one is still playing.
    """


class NarrationNotFoundError(NarrationStateError):
    """No narration with the given id is held by the queue."""

    def __init__(self, narration_id: UUID) -> None:
        self.narration_id = narration_id
        super().__init__(f"narration {narration_id} is not in the queue")


class CollaboratorError(EvTourError):
    """Failure reported by an external collaborator (content, playback)."""


class ContentGenerationFailedError(CollaboratorError):
    """The content generator could not produce a narration for a POI."""

    def __init__(self, message: str, *, poi_id: UUID | None = None) -> None:
        self.poi_id = poi_id
        super().__init__(message)


class PlaybackFailedError(CollaboratorError):
    """The audio engine could not play a narration."""

    def __init__(self, message: str, *, narration_id: UUID | None = None) -> None:
        self.narration_id = narration_id
        super().__init__(message)
