"""Sequential narration playback queue.

This is the only component that changes a narration's status. Every
operation, read-only queries included, runs under a single
:class:`threading.Lock`; none of them blocks or awaits while holding it, so
the queue can be shared between event-loop coroutines and worker threads
(e.g. a UI "skip" and a background proximity trigger).

Lifecycle per entry::

    queued -> playing -> completed | skipped | cancelled | failed
    queued -> skipped | cancelled | failed

At most one entry is ``playing`` at any instant. Callers only ever receive
frozen snapshots; the underlying list is never exposed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime
from uuid import UUID

from evtour.exceptions import InvalidInputError, NarrationNotFoundError, NarrationStateError
from evtour.models._base import utcnow
from evtour.models.narration import Narration, NarrationStatus

_logger = logging.getLogger(__name__)


class NarrationQueue:
    """FIFO queue of narrations with a single "current" (playing) entry.

    The queue never retries anything: when generation or playback fails the
    caller records ``failed`` via :meth:`update_status` and decides what to
    do next.
    """

    def __init__(self, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: list[Narration] = []
        self._index: dict[UUID, int] = {}
        self._current_id: UUID | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def enqueue(self, narrations: Iterable[Narration]) -> int:
        """Append *narrations* in order and return how many were added.

        The whole batch is rejected with :class:`InvalidInputError` if any
        entry is not ``queued`` or reuses an id already in the queue.
        """
        batch = list(narrations)
        with self._lock:
            seen = set(self._index)
            for narration in batch:
                if narration.status != NarrationStatus.QUEUED:
                    raise InvalidInputError(f"narration {narration.id} must be queued, got {narration.status}")
                if narration.id in seen:
                    raise InvalidInputError(f"narration {narration.id} is already in the queue")
                seen.add(narration.id)
            for narration in batch:
                self._index[narration.id] = len(self._entries)
                self._entries.append(narration)
        _logger.debug("Enqueued %d narration(s)", len(batch))
        return len(batch)

    def next(self, *, expected_current: UUID | None = None) -> Narration | None:
        """Start the first queued narration and make it current.

        A narration still playing is marked ``skipped`` first. When
        *expected_current* is given the queue only advances if the current
        entry still has that id, so two callers reacting to the same
        narration cannot advance twice.

        Returns ``None`` when nothing is queued (or the expectation did not
        hold); this is normal control flow, not an error.
        """
        with self._lock:
            if expected_current is not None and self._current_id != expected_current:
                _logger.debug("Not advancing: current is %s, expected %s", self._current_id, expected_current)
                return None
            position = self._first_queued()
            if position is None:
                return None
            now = self._clock()
            if self._current_id is not None:
                self._finish(self._index[self._current_id], NarrationStatus.SKIPPED, now)
            entry = self._entries[position].model_copy(update={"status": NarrationStatus.PLAYING, "started_at": now})
            self._entries[position] = entry
            self._current_id = entry.id
            return entry

    def update_status(self, narration_id: UUID, status: NarrationStatus) -> bool:
        """Record a status transition for *narration_id*.

        Returns ``False`` when nothing changed: the entry already had
        *status*, or it had reached a terminal status (a late "completed"
        after a "skip" is dropped). Raises :class:`NarrationNotFoundError`
        for unknown ids and :class:`NarrationStateError` for transitions
        the lifecycle does not allow, including a second entry entering
        ``playing``.
        """
        with self._lock:
            position = self._index.get(narration_id)
            if position is None:
                raise NarrationNotFoundError(narration_id)
            entry = self._entries[position]

            if entry.status.is_terminal:
                _logger.debug("Ignoring %s for narration %s, already %s", status, narration_id, entry.status)
                return False
            if status == entry.status:
                return False
            if status == NarrationStatus.QUEUED:
                raise NarrationStateError(f"narration {narration_id} cannot go back to queued")

            now = self._clock()
            if status == NarrationStatus.PLAYING:
                if self._current_id is not None:
                    raise NarrationStateError(f"narration {self._current_id} is already playing")
                self._entries[position] = entry.model_copy(update={"status": status, "started_at": now})
                self._current_id = narration_id
                return True

            if status == NarrationStatus.COMPLETED and entry.status != NarrationStatus.PLAYING:
                raise NarrationStateError(f"narration {narration_id} cannot complete without playing")
            self._finish(position, status, now)
            return True

    def clear(self) -> None:
        """Discard every entry and reset the current narration."""
        with self._lock:
            self._entries.clear()
            self._index.clear()
            self._current_id = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current(self) -> Narration | None:
        """The entry currently playing, if any."""
        with self._lock:
            if self._current_id is None:
                return None
            return self._entries[self._index[self._current_id]]

    def pending_count(self) -> int:
        """Number of entries still ``queued``."""
        with self._lock:
            return sum(1 for entry in self._entries if entry.status == NarrationStatus.QUEUED)

    def get(self, narration_id: UUID) -> Narration | None:
        with self._lock:
            position = self._index.get(narration_id)
            return None if position is None else self._entries[position]

    def all(self) -> tuple[Narration, ...]:
        """Snapshot of every entry in FIFO order."""
        with self._lock:
            return tuple(self._entries)

    # ------------------------------------------------------------------
    # Internal helpers (caller holds the lock)
    # ------------------------------------------------------------------

    def _first_queued(self) -> int | None:
        for position, entry in enumerate(self._entries):
            if entry.status == NarrationStatus.QUEUED:
                return position
        return None

    def _finish(self, position: int, status: NarrationStatus, now: datetime) -> None:
        entry = self._entries[position]
        self._entries[position] = entry.model_copy(update={"status": status, "completed_at": now})
        if self._current_id == entry.id:
            self._current_id = None
        _logger.debug("Narration %s (%s) -> %s", entry.id, entry.poi_name, status)
