"""Glue between the narration queue and the external collaborators.

:class:`TourNarrator` is what an execution layer drives on each location
update: it decides whether to trigger, advances the queue, awaits the audio
engine and records the outcome. Collaborator failures end up as ``failed``
queue entries instead of propagating, so the tour keeps going.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence, Set
from dataclasses import dataclass, field
from uuid import UUID

from evtour._constants import DEFAULT_ARRIVAL_WINDOW_SECONDS, SECONDS_PER_HOUR
from evtour.content import AudioPlayback, ContentGenerator
from evtour.exceptions import ContentGenerationFailedError, PlaybackFailedError
from evtour.models.narration import Narration, NarrationStatus
from evtour.models.poi import POI, InterestCategory
from evtour.narration_queue import NarrationQueue
from evtour.timing import NarrationTimingCalculator, StandardNarrationTimingCalculator

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PreparationReport:
    """Outcome of :meth:`TourNarrator.prepare`."""

    enqueued: list[Narration] = field(default_factory=list)
    failed_poi_ids: list[UUID] = field(default_factory=list)


class TourNarrator:
    """Drives narration playback for one tour."""

    def __init__(
        self,
        queue: NarrationQueue,
        playback: AudioPlayback,
        timing_calculator: NarrationTimingCalculator | None = None,
        *,
        arrival_window_seconds: tuple[float, float] = DEFAULT_ARRIVAL_WINDOW_SECONDS,
    ) -> None:
        self._queue = queue
        self._playback = playback
        self._timing = timing_calculator or StandardNarrationTimingCalculator()
        self._arrival_window = arrival_window_seconds

    @property
    def queue(self) -> NarrationQueue:
        return self._queue

    async def prepare(
        self,
        pois: Sequence[POI],
        generator: ContentGenerator,
        *,
        target_duration_seconds: float = 120.0,
        interests: Set[InterestCategory] = frozenset(),
    ) -> PreparationReport:
        """Generate narrations for *pois* in order and enqueue the successes.

        POIs whose generation fails are reported, not retried.
        """
        report = PreparationReport()
        for poi in pois:
            try:
                narration = await generator.generate_narration(poi, target_duration_seconds, interests)
            except ContentGenerationFailedError:
                _logger.debug("Content generation failed for %s", poi.name, exc_info=True)
                report.failed_poi_ids.append(poi.id)
                continue
            report.enqueued.append(narration)
        self._queue.enqueue(report.enqueued)
        return report

    def should_trigger(self, narration: Narration, distance_from_poi_miles: float, current_speed_mph: float) -> bool:
        """Whether *narration* should start at the current distance and speed.

        True when a narration started now would end inside the arrival
        window, i.e. between its lower and upper bound seconds before the
        vehicle reaches the POI.
        """
        timing = self._timing.calculate_timing(
            narration,
            distance_from_poi_miles,
            current_speed_mph,
            self._arrival_window,
        )
        if not timing.is_valid:
            return False
        gap_seconds = timing.distance_from_poi_on_completion_miles / current_speed_mph * SECONDS_PER_HOUR
        return gap_seconds <= self._arrival_window[1]

    async def play_next(self, *, expected_current: UUID | None = None) -> Narration | None:
        """Advance the queue and play the new current narration.

        Returns the final snapshot of the played entry (``completed`` or
        ``failed``), or ``None`` when the queue did not advance.
        """
        narration = self._queue.next(expected_current=expected_current)
        if narration is None:
            return None
        try:
            await self._playback.play(narration)
        except PlaybackFailedError:
            _logger.debug("Playback failed for narration %s", narration.id, exc_info=True)
            self._queue.update_status(narration.id, NarrationStatus.FAILED)
        else:
            # a concurrent skip/cancel wins; the queue ignores this update then
            self._queue.update_status(narration.id, NarrationStatus.COMPLETED)
        return self._queue.get(narration.id)

    async def cancel_current(self) -> Narration | None:
        """Stop the audio engine, then mark the current narration cancelled."""
        current = self._queue.current()
        if current is None:
            return None
        await self._playback.stop()
        self._queue.update_status(current.id, NarrationStatus.CANCELLED)
        return self._queue.get(current.id)

    async def skip_current(self) -> Narration | None:
        """Stop the audio engine and mark the current narration skipped."""
        current = self._queue.current()
        if current is None:
            return None
        await self._playback.stop()
        self._queue.update_status(current.id, NarrationStatus.SKIPPED)
        return self._queue.get(current.id)
