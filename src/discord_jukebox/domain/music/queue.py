"""The per-guild playback queue aggregate.

All operations here are synchronous and free of I/O.  Starting or stopping
audio is left to the application layer, which inspects the returned
:class:`QueueChange` to decide whether playback must be restarted.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from discord_jukebox.domain.music.entities import QueueEntry, Track
from discord_jukebox.domain.music.fairness import promote_deferred
from discord_jukebox.domain.music.selection import TrackIndex, TrackIndexSelection
from discord_jukebox.domain.music.value_objects import QueueChange, WaitEstimate
from discord_jukebox.domain.shared.exceptions import ExecutionError
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.domain.shared.types import (
    DiscordSnowflake,
    NonNegativeInt,
    QuotaInt,
)

logger = logging.getLogger(__name__)


class PlaybackQueue(BaseModel):
    """Aggregate root holding the ordered entries of one guild.

    ``cursor`` points at the current entry and may equal ``len(entries)``
    (past the end).  Entries in ``[cursor, deferred_boundary)`` are final,
    the rest are deferred until fairness promotes them.
    """

    model_config = ConfigDict(strict=True)

    guild_id: DiscordSnowflake
    entries: list[QueueEntry] = Field(default_factory=list)
    cursor: NonNegativeInt = 0
    deferred_boundary: NonNegativeInt = 0
    quota: QuotaInt | None = None
    active: bool = False

    @property
    def length(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def current_entry(self) -> QueueEntry | None:
        if self.cursor < len(self.entries):
            return self.entries[self.cursor]
        return None

    def is_final(self, position: int) -> bool:
        return self.cursor <= position < self.deferred_boundary

    def is_deferred(self, position: int) -> bool:
        return self.deferred_boundary <= position < len(self.entries)

    def check_invariants(self) -> None:
        assert 0 <= self.cursor <= self.deferred_boundary <= len(self.entries), (
            self.cursor,
            self.deferred_boundary,
            len(self.entries),
        )

    def reorder(self) -> None:
        """Re-run fairness promotion after a structural change."""
        self.deferred_boundary = promote_deferred(
            self.entries, self.cursor, self.deferred_boundary, self.quota
        )
        self.check_invariants()

    def _current_changed(self, before: QueueEntry | None) -> bool:
        return self.current_entry is not before

    # === Mutations ===

    def append(self, track: Track) -> QueueEntry:
        entry = QueueEntry(track=track)
        self.entries.append(entry)
        self.reorder()
        return entry

    def remove(self, selection: TrackIndexSelection) -> QueueChange:
        positions = sorted(selection.resolve(self.cursor, len(self.entries)), reverse=True)
        before = self.current_entry

        for position in positions:
            del self.entries[position]
            if position < self.cursor:
                self.cursor -= 1
            if position < self.deferred_boundary:
                self.deferred_boundary -= 1

        self.reorder()
        return QueueChange(len(positions), self._current_changed(before))

    def move(self, selection: TrackIndexSelection, destination: TrackIndex) -> QueueChange:
        """Relocate the selected entries in front of *destination*.

        The moved entries keep their original relative order.  Inserting in
        front of the cursor shifts the cursor so the current entry stays
        current; inserting exactly at the cursor makes the first moved entry
        the new current one.

        Raises:
            ExecutionError: If the destination lies outside ``0..=len``.
        """
        target = destination.resolve(self.cursor, len(self.entries))
        if target.is_out_of_bounds:
            raise ExecutionError(
                ErrorMessages.DESTINATION_DOES_NOT_EXIST.format(number=target.number)
            )

        insert_at = target.position
        positions = sorted(selection.resolve(self.cursor, len(self.entries)), reverse=True)
        before = self.current_entry

        moved: list[QueueEntry] = []
        for position in positions:
            moved.append(self.entries.pop(position))
            if position < self.cursor:
                self.cursor -= 1
            if position < self.deferred_boundary:
                self.deferred_boundary -= 1
            if position < insert_at:
                insert_at -= 1
        moved.reverse()

        if insert_at < self.cursor:
            self.cursor += len(moved)
        if insert_at < self.deferred_boundary:
            self.deferred_boundary += len(moved)
        self.entries[insert_at:insert_at] = moved

        self.reorder()
        return QueueChange(len(moved), self._current_changed(before))

    def reverse(self, selection: TrackIndexSelection) -> QueueChange:
        positions = sorted(selection.resolve(self.cursor, len(self.entries)))
        before = self.current_entry

        for offset in range(len(positions) // 2):
            left, right = positions[offset], positions[-1 - offset]
            self.entries[left], self.entries[right] = self.entries[right], self.entries[left]

        self.reorder()
        return QueueChange(len(positions), self._current_changed(before))

    def goto(self, index: TrackIndex) -> QueueChange:
        """Move the cursor; the past-the-end slot is a valid target.

        Raises:
            ExecutionError: If *index* resolves outside ``0..=len``.
        """
        target = index.resolve(self.cursor, len(self.entries))
        if target.is_out_of_bounds:
            raise ExecutionError(ErrorMessages.TRACK_DOES_NOT_EXIST.format(number=target.number))

        before = self.current_entry
        self.cursor = target.position
        self.reorder()
        return QueueChange(0, self._current_changed(before))

    def set_quota(self, quota: int | None) -> None:
        """Set the per-user quota; ``None`` and ``0`` both disable fairness."""
        self.quota = quota or None
        self.reorder()

    # === Queries ===

    def select(self, selection: TrackIndexSelection) -> list[tuple[int, QueueEntry]]:
        """Return the selected entries with their positions in queue order.

        Raises:
            ExecutionError: If the queue is empty or nothing was selected.
        """
        if not self.entries:
            raise ExecutionError(ErrorMessages.QUEUE_EMPTY)

        positions = sorted(selection.resolve(self.cursor, len(self.entries)))
        if not positions:
            raise ExecutionError(ErrorMessages.NO_TRACKS_MATCHED)
        return [(position, self.entries[position]) for position in positions]

    def estimate_wait(self, index: TrackIndex, elapsed: float | None) -> WaitEstimate:
        """Estimate how long until *index* starts playing.

        *elapsed* is the playback position of the current entry, ``0.0`` when
        it has not started yet and ``None`` when the position is unknown.
        Entries without a known duration turn the result into a lower bound.

        Raises:
            ExecutionError: If the target does not exist, is current or was
                already played.
        """
        target = index.resolve(self.cursor, len(self.entries))
        if target.is_out_of_bounds:
            raise ExecutionError(ErrorMessages.TRACK_DOES_NOT_EXIST.format(number=target.number))
        if target.position < self.cursor:
            raise ExecutionError(ErrorMessages.TRACK_ALREADY_PLAYED.format(number=target.number))
        if target.position == self.cursor:
            raise ExecutionError(
                ErrorMessages.TRACK_CURRENTLY_PLAYING.format(number=target.number)
            )

        unsure = False
        total = 0.0

        current = self.entries[self.cursor]
        if current.duration_seconds is None or elapsed is None:
            unsure = True
        else:
            total += current.duration_seconds - min(elapsed, current.duration_seconds)

        for entry in self.entries[self.cursor + 1 : target.position]:
            if entry.duration_seconds is None:
                unsure = True
            else:
                total += entry.duration_seconds

        return WaitEstimate(
            position=target.position,
            seconds=int(total),
            is_lower_bound=unsure,
            reaches_end=target.is_end,
        )
