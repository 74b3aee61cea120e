from __future__ import annotations

import asyncio

import pytest
from conftest import make_charger, make_narration, make_poi

from evtour.content import TemplateContentGenerator
from evtour.exceptions import PlaybackFailedError
from evtour.models import Narration, NarrationStatus, POICategory
from evtour.narration_queue import NarrationQueue
from evtour.narrator import TourNarrator


class _RecordingPlayback:
    def __init__(self) -> None:
        self.played: list[str] = []
        self.stops = 0

    async def play(self, narration: Narration) -> None:
        self.played.append(narration.poi_name)

    async def stop(self) -> None:
        self.stops += 1


class _FailingPlayback(_RecordingPlayback):
    async def play(self, narration: Narration) -> None:
        raise PlaybackFailedError("speaker unavailable", narration_id=narration.id)


class _BlockingPlayback(_RecordingPlayback):
    """Holds ``play`` open until the test releases it."""

    def __init__(self) -> None:
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def play(self, narration: Narration) -> None:
        self.started.set()
        await self.release.wait()


@pytest.mark.asyncio
async def test_prepare_enqueues_generated_narrations() -> None:
    narrator = TourNarrator(NarrationQueue(), _RecordingPlayback())
    charger = make_charger("Supercharger", 41.0)
    pois = [make_poi("Old Mill", 40.5), charger, make_poi("Canyon Rim", 41.5, category=POICategory.SCENIC)]

    report = await narrator.prepare(pois, TemplateContentGenerator())

    assert [n.poi_name for n in report.enqueued] == ["Old Mill", "Canyon Rim"]
    assert report.failed_poi_ids == [charger.id]
    assert narrator.queue.pending_count() == 2


@pytest.mark.asyncio
async def test_play_next_plays_in_order() -> None:
    playback = _RecordingPlayback()
    narrator = TourNarrator(NarrationQueue(), playback)
    narrator.queue.enqueue([make_narration("Mill"), make_narration("Bridge")])

    first = await narrator.play_next()
    second = await narrator.play_next()

    assert first is not None and first.status == NarrationStatus.COMPLETED
    assert second is not None and second.status == NarrationStatus.COMPLETED
    assert playback.played == ["Mill", "Bridge"]
    assert await narrator.play_next() is None


@pytest.mark.asyncio
async def test_playback_failure_is_recorded() -> None:
    narrator = TourNarrator(NarrationQueue(), _FailingPlayback())
    narrator.queue.enqueue([make_narration("Mill"), make_narration("Bridge")])

    result = await narrator.play_next()

    assert result is not None and result.status == NarrationStatus.FAILED
    assert narrator.queue.current() is None
    assert narrator.queue.pending_count() == 1


@pytest.mark.asyncio
async def test_skip_during_playback_wins_over_completion() -> None:
    playback = _BlockingPlayback()
    narrator = TourNarrator(NarrationQueue(), playback)
    narrator.queue.enqueue([make_narration("Mill")])

    task = asyncio.create_task(narrator.play_next())
    await playback.started.wait()
    skipped = await narrator.skip_current()
    playback.release.set()
    result = await task

    assert skipped is not None and skipped.status == NarrationStatus.SKIPPED
    assert result is not None and result.status == NarrationStatus.SKIPPED
    assert playback.stops == 1


@pytest.mark.asyncio
async def test_cancel_current_stops_audio_first() -> None:
    playback = _RecordingPlayback()
    queue = NarrationQueue()
    narrator = TourNarrator(queue, playback)
    queue.enqueue([make_narration("Mill")])
    queue.next()

    cancelled = await narrator.cancel_current()

    assert cancelled is not None and cancelled.status == NarrationStatus.CANCELLED
    assert playback.stops == 1
    assert queue.current() is None


@pytest.mark.asyncio
async def test_cancel_without_current_does_nothing() -> None:
    playback = _RecordingPlayback()
    narrator = TourNarrator(NarrationQueue(), playback)
    assert await narrator.cancel_current() is None
    assert await narrator.skip_current() is None
    assert playback.stops == 0


@pytest.mark.parametrize(
    ("distance", "expected"),
    [
        (2.5, True),  # ends 90 s before arrival
        (5.0, False),  # ends 240 s before arrival, too early
        (1.5, False),  # ends 30 s before arrival, too late
    ],
)
def test_should_trigger_inside_arrival_window(distance: float, expected: bool) -> None:
    narrator = TourNarrator(NarrationQueue(), _RecordingPlayback())
    narration = make_narration(duration_seconds=60.0)
    assert narrator.should_trigger(narration, distance, 60.0) is expected


def test_should_not_trigger_when_stopped() -> None:
    narrator = TourNarrator(NarrationQueue(), _RecordingPlayback())
    assert narrator.should_trigger(make_narration(), 3.0, 0.0) is False
