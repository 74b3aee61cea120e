from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from uuid import uuid4

import pytest
from conftest import make_narration

from evtour.exceptions import InvalidInputError, NarrationNotFoundError, NarrationStateError
from evtour.models import Narration, NarrationStatus
from evtour.narration_queue import NarrationQueue


def _dt() -> datetime:
    return datetime(2026, 1, 1, tzinfo=UTC)


def _queue_with(*names: str) -> tuple[NarrationQueue, list[Narration]]:
    queue = NarrationQueue(clock=_dt)
    narrations = [make_narration(name) for name in names]
    queue.enqueue(narrations)
    return queue, narrations


def _playing(queue: NarrationQueue) -> list[Narration]:
    return [n for n in queue.all() if n.status == NarrationStatus.PLAYING]


# ------------------------------------------------------------------
# enqueue / next
# ------------------------------------------------------------------


def test_next_on_empty_queue_returns_none() -> None:
    queue = NarrationQueue()
    assert queue.next() is None
    assert queue.current() is None
    assert len(queue) == 0


def test_drains_in_fifo_order() -> None:
    queue, narrations = _queue_with("Mill", "Bridge", "Falls")
    played = []
    while (entry := queue.next()) is not None:
        played.append(entry.poi_name)
        queue.update_status(entry.id, NarrationStatus.COMPLETED)
    assert played == ["Mill", "Bridge", "Falls"]
    assert queue.pending_count() == 0
    assert {n.status for n in queue.all()} == {NarrationStatus.COMPLETED}
    assert [n.id for n in queue.all()] == [n.id for n in narrations]


def test_next_marks_playing_and_stamps_start() -> None:
    queue, narrations = _queue_with("Mill")
    entry = queue.next()
    assert entry is not None
    assert entry.id == narrations[0].id
    assert entry.status == NarrationStatus.PLAYING
    assert entry.started_at == _dt()
    assert queue.current() == entry
    assert queue.pending_count() == 0


def test_next_skips_entry_still_playing() -> None:
    queue, narrations = _queue_with("Mill", "Bridge")
    queue.next()
    second = queue.next()
    assert second is not None and second.poi_name == "Bridge"
    first = queue.get(narrations[0].id)
    assert first is not None
    assert first.status == NarrationStatus.SKIPPED
    assert first.completed_at == _dt()
    assert len(_playing(queue)) == 1


def test_next_with_nothing_queued_keeps_current() -> None:
    queue, _ = _queue_with("Mill")
    entry = queue.next()
    assert queue.next() is None
    assert queue.current() == entry


def test_expected_current_guards_double_advance() -> None:
    queue, _ = _queue_with("Mill", "Bridge", "Falls")
    first = queue.next()
    assert first is not None

    second = queue.next(expected_current=first.id)
    assert second is not None and second.poi_name == "Bridge"

    # a second caller still reacting to "Mill" must not advance again
    assert queue.next(expected_current=first.id) is None
    assert queue.current() == second
    assert queue.pending_count() == 1


def test_enqueue_rejects_non_queued_entries() -> None:
    queue = NarrationQueue()
    playing = make_narration().model_copy(update={"status": NarrationStatus.PLAYING})
    with pytest.raises(InvalidInputError):
        queue.enqueue([make_narration(), playing])
    assert len(queue) == 0


def test_enqueue_rejects_duplicate_ids() -> None:
    queue, narrations = _queue_with("Mill")
    with pytest.raises(InvalidInputError):
        queue.enqueue([narrations[0]])
    duplicate = make_narration("Bridge")
    with pytest.raises(InvalidInputError):
        queue.enqueue([duplicate, duplicate])
    assert len(queue) == 1


def test_clear_resets_everything() -> None:
    queue, _ = _queue_with("Mill", "Bridge")
    queue.next()
    queue.clear()
    assert len(queue) == 0
    assert queue.current() is None
    assert queue.all() == ()


# ------------------------------------------------------------------
# update_status
# ------------------------------------------------------------------


class TestUpdateStatus:
    def test_complete_current(self) -> None:
        queue, _ = _queue_with("Mill")
        entry = queue.next()
        assert entry is not None
        assert queue.update_status(entry.id, NarrationStatus.COMPLETED) is True
        updated = queue.get(entry.id)
        assert updated is not None
        assert updated.status == NarrationStatus.COMPLETED
        assert updated.completed_at == _dt()
        assert queue.current() is None

    def test_late_update_after_terminal_is_ignored(self) -> None:
        queue, _ = _queue_with("Mill")
        entry = queue.next()
        assert entry is not None
        queue.update_status(entry.id, NarrationStatus.SKIPPED)
        assert queue.update_status(entry.id, NarrationStatus.COMPLETED) is False
        updated = queue.get(entry.id)
        assert updated is not None and updated.status == NarrationStatus.SKIPPED

    def test_same_status_is_a_no_op(self) -> None:
        queue, narrations = _queue_with("Mill")
        assert queue.update_status(narrations[0].id, NarrationStatus.QUEUED) is False

    def test_queued_entry_can_be_cancelled(self) -> None:
        queue, narrations = _queue_with("Mill", "Bridge")
        assert queue.update_status(narrations[1].id, NarrationStatus.CANCELLED) is True
        assert queue.pending_count() == 1
        queue.next()
        assert queue.next() is None

    def test_queued_entry_cannot_complete(self) -> None:
        queue, narrations = _queue_with("Mill")
        with pytest.raises(NarrationStateError):
            queue.update_status(narrations[0].id, NarrationStatus.COMPLETED)

    def test_playing_entry_cannot_go_back_to_queued(self) -> None:
        queue, _ = _queue_with("Mill")
        entry = queue.next()
        assert entry is not None
        with pytest.raises(NarrationStateError):
            queue.update_status(entry.id, NarrationStatus.QUEUED)

    def test_second_playing_entry_is_rejected(self) -> None:
        queue, narrations = _queue_with("Mill", "Bridge")
        assert queue.update_status(narrations[0].id, NarrationStatus.PLAYING) is True
        with pytest.raises(NarrationStateError):
            queue.update_status(narrations[1].id, NarrationStatus.PLAYING)
        assert len(_playing(queue)) == 1

    def test_unknown_id(self) -> None:
        queue, _ = _queue_with("Mill")
        missing = uuid4()
        with pytest.raises(NarrationNotFoundError) as excinfo:
            queue.update_status(missing, NarrationStatus.SKIPPED)
        assert excinfo.value.narration_id == missing


# ------------------------------------------------------------------
# Concurrency
# ------------------------------------------------------------------


def test_concurrent_advances_keep_single_playing_entry() -> None:
    queue = NarrationQueue()
    queue.enqueue(make_narration(f"Stop {i}") for i in range(100))

    def advance(_: int) -> Narration | None:
        entry = queue.next()
        assert len(_playing(queue)) <= 1
        return entry

    with ThreadPoolExecutor(max_workers=8) as pool:
        started = [entry for entry in pool.map(advance, range(150)) if entry is not None]

    assert len(started) == 100
    assert len({entry.id for entry in started}) == 100
    statuses = [n.status for n in queue.all()]
    assert statuses.count(NarrationStatus.PLAYING) == 1
    assert statuses.count(NarrationStatus.SKIPPED) == 99
    assert queue.pending_count() == 0


def test_concurrent_compare_and_advance_moves_once() -> None:
    queue = NarrationQueue()
    queue.enqueue(make_narration(f"Stop {i}") for i in range(10))
    first = queue.next()
    assert first is not None

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: queue.next(expected_current=first.id), range(20)))

    assert sum(1 for entry in results if entry is not None) == 1
    assert queue.pending_count() == 8
