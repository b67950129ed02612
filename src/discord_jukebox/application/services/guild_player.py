"""Guild player - the queue of one guild plus the playback session it owns."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...domain.music.entities import QueueEntry, Track
from ...domain.music.queue import PlaybackQueue
from ...domain.music.selection import TrackIndex, TrackIndexRange, TrackIndexSelection
from ...domain.music.value_objects import QueueChange
from ...domain.shared.exceptions import AdapterError, ExecutionError
from ...domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from ...utils.reply import position_bar

if TYPE_CHECKING:
    from ..interfaces.output_sink import OutputSink
    from ..interfaces.playback_adapter import PlaybackAdapter, PlaybackHandle

logger = logging.getLogger(__name__)

DEFAULT_PRINT_BEFORE = 2
DEFAULT_PRINT_AFTER = 15


class GuildPlayer:
    """Command surface of a guild's queue.

    Owns at most one live :class:`PlaybackHandle`; the old handle is always
    stopped before a new one is requested.  Callers must serialize access,
    the :class:`GuildRegistry` does so with one lock per guild.
    """

    def __init__(
        self,
        guild_id: DiscordSnowflake,
        *,
        adapter: PlaybackAdapter,
        output: OutputSink,
        default_quota: int | None = None,
        print_before: int = DEFAULT_PRINT_BEFORE,
        print_after: int = DEFAULT_PRINT_AFTER,
    ) -> None:
        self.guild_id = guild_id
        self.queue = PlaybackQueue(guild_id=guild_id, quota=default_quota or None)
        self._adapter = adapter
        self._output = output
        self._handle: PlaybackHandle | None = None
        self._default_selection = TrackIndexSelection.of(
            TrackIndexRange.span(TrackIndex.current(-print_before), TrackIndex.current(print_after))
        )

    @property
    def handle(self) -> PlaybackHandle | None:
        return self._handle

    @property
    def output(self) -> OutputSink:
        return self._output

    def set_output(self, output: OutputSink) -> None:
        """Redirect announcements such as "Now playing" to *output*."""
        self._output = output

    # === Playback control ===

    def _release_handle(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.stop()
        except AdapterError as e:
            logger.warning(LogTemplates.PLAYBACK_ERROR, self.guild_id, e)

    async def play(self) -> None:
        """Mark the queue active and (re)start the entry under the cursor.

        Raises:
            ExecutionError: If there is no entry under the cursor.
            AdapterError: If the playback backend fails; queue state is unchanged.
        """
        self.queue.active = True
        self._release_handle()

        entry = self.queue.current_entry
        if entry is None:
            raise ExecutionError(ErrorMessages.NOTHING_TO_PLAY)

        self._handle = await self._adapter.start(self.guild_id, entry.track)
        await self._output.print(
            DiscordUIMessages.NOW_PLAYING.format(
                caption=entry.caption, page_url=entry.track.webpage_url
            )
        )

    async def stop(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.stop()
        elif not self.queue.active:
            raise ExecutionError(ErrorMessages.NOTHING_TO_STOP)
        self.queue.active = False

    def pause(self) -> None:
        if self._handle is None:
            raise ExecutionError(ErrorMessages.NOTHING_TO_PAUSE)
        self._handle.pause()

    def resume(self) -> None:
        if self._handle is None:
            raise ExecutionError(ErrorMessages.NOTHING_TO_RESUME)
        self._handle.resume()

    def seek(self, seconds: float) -> None:
        if self._handle is None:
            raise ExecutionError(ErrorMessages.NOTHING_TO_SEEK)
        try:
            self._handle.seek(seconds)
        except AdapterError:
            # A failed seek leaves the handle dead; no ended notification follows.
            self._release_handle()
            raise

    async def _restart_if_needed(self, change: QueueChange) -> None:
        if change.current_changed and self.queue.active:
            await self.play()

    # === Queue mutations ===

    async def extend(self, tracks: Iterable[Track]) -> list[QueueEntry]:
        """Append *tracks* and auto-start playback once if the queue is waiting for input."""
        entries = []
        for track in tracks:
            entries.append(self.queue.append(track))
            logger.debug(
                LogTemplates.QUEUE_APPENDED, track.title, self.queue.length, self.guild_id
            )

        if entries and self.queue.active and self._handle is None:
            try:
                await self.play()
            except ExecutionError as e:
                logger.warning(LogTemplates.PLAYBACK_RESTART_FAILED, self.guild_id, e)
                await self._output.print(DiscordUIMessages.ERROR_PREFIX.format(message=e.message))
        return entries

    async def append(self, track: Track) -> QueueEntry:
        entries = await self.extend([track])
        return entries[0]

    async def remove(self, reply: OutputSink, selection: TrackIndexSelection) -> QueueChange:
        change = self.queue.remove(selection)
        logger.info(LogTemplates.QUEUE_REMOVED, change.count, self.guild_id)
        await reply.print(DiscordUIMessages.REMOVED_TRACKS.format(count=change.count))
        await self._restart_if_needed(change)
        return change

    async def move(
        self, reply: OutputSink, selection: TrackIndexSelection, destination: TrackIndex
    ) -> QueueChange:
        change = self.queue.move(selection, destination)
        logger.info(LogTemplates.QUEUE_MOVED, change.count, destination, self.guild_id)
        await reply.print(DiscordUIMessages.MOVED_TRACKS.format(count=change.count))
        await self._restart_if_needed(change)
        return change

    async def reverse(self, reply: OutputSink, selection: TrackIndexSelection) -> QueueChange:
        change = self.queue.reverse(selection)
        logger.info(LogTemplates.QUEUE_REVERSED, change.count, self.guild_id)
        await reply.print(DiscordUIMessages.REVERSED_TRACKS.format(count=change.count))
        await self._restart_if_needed(change)
        return change

    async def goto(self, index: TrackIndex) -> QueueChange:
        previous = self.queue.cursor
        change = self.queue.goto(index)
        logger.info(LogTemplates.QUEUE_CURSOR_MOVED, previous, self.queue.cursor, self.guild_id)
        if self.queue.active and (change.current_changed or self._handle is None):
            await self.play()
        return change

    async def next(self) -> QueueChange:
        return await self.goto(TrackIndex.current(1))

    async def prev(self) -> QueueChange:
        return await self.goto(TrackIndex.current(-1))

    def set_quota(self, quota: int | None) -> None:
        self.queue.set_quota(quota)
        logger.info(LogTemplates.QUEUE_QUOTA_CHANGED, self.queue.quota, self.guild_id)

    async def advance(self, handle: PlaybackHandle) -> None:
        """Handle the natural end of *handle*; stale handles are ignored."""
        if handle is not self._handle:
            logger.debug(LogTemplates.PLAYBACK_STALE_HANDLE, self.guild_id)
            return

        self._handle = None
        self.queue.goto(TrackIndex.current(1))
        if self.queue.current_entry is None:
            logger.info(LogTemplates.TRACK_QUEUE_FINISHED, self.guild_id)
            await self._output.print(DiscordUIMessages.QUEUE_FINISHED)
            return

        if self.queue.active:
            await self.play()

    # === Reports ===

    async def print(
        self, reply: OutputSink, selection: TrackIndexSelection | None = None
    ) -> None:
        if selection is None or selection.is_empty:
            selection = self._default_selection
        selected = self.queue.select(selection)

        queue = self.queue
        lines = [DiscordUIMessages.QUEUE_HEADER]
        for position, entry in selected:
            number = position + 1
            if position == queue.cursor:
                lines.append(f"`▶{number:>4}:` {entry.caption} `◀`")
            elif position < queue.deferred_boundary:
                lines.append(f"` {number:>4}:` {entry.caption}")
            else:
                lines.append(f"`?{number:>4}:` {entry.caption}")

        last_position = selected[-1][0]
        if last_position + 1 < queue.length:
            lines.append(DiscordUIMessages.QUEUE_MORE.format(count=queue.length - last_position - 1))
        elif queue.cursor == queue.length:
            lines.append(DiscordUIMessages.QUEUE_END_CURRENT)
        else:
            lines.append(DiscordUIMessages.QUEUE_END)

        await reply.print("\n".join(lines))

    async def print_quota(self, reply: OutputSink) -> None:
        if self.queue.quota is None:
            await reply.print(DiscordUIMessages.QUOTA_OFF)
        else:
            await reply.print(DiscordUIMessages.QUOTA_ON.format(quota=self.queue.quota))

    async def when(self, reply: OutputSink, index: TrackIndex) -> None:
        elapsed: float | None = 0.0
        if self._handle is not None:
            try:
                elapsed = self._handle.current_position()
            except AdapterError as e:
                logger.debug(LogTemplates.PLAYBACK_ERROR, self.guild_id, e)
                elapsed = None

        estimate = self.queue.estimate_wait(index, elapsed)
        unsure = DiscordUIMessages.WHEN_UNSURE if estimate.is_lower_bound else ""
        if estimate.reaches_end:
            text = DiscordUIMessages.WHEN_QUEUE_END.format(
                duration=estimate.formatted, unsure=unsure
            )
        else:
            text = DiscordUIMessages.WHEN_TRACK.format(
                number=estimate.number, duration=estimate.formatted, unsure=unsure
            )
        await reply.print(text)

    async def now(self, reply: OutputSink) -> None:
        entry = self.queue.current_entry
        if not self.queue.active or entry is None or self._handle is None:
            await reply.print(DiscordUIMessages.NO_CURRENT_TRACK)
            return

        await reply.print(
            DiscordUIMessages.NOW_PLAYING.format(
                caption=entry.caption, page_url=entry.track.webpage_url
            )
        )
        if entry.duration_seconds is None:
            await reply.print(DiscordUIMessages.UNKNOWN_DURATION)
            return
        try:
            position = self._handle.current_position()
        except AdapterError:
            await reply.print(DiscordUIMessages.UNKNOWN_POSITION)
            return
        await reply.print(position_bar(position, entry.duration_seconds))

    async def shutdown(self) -> None:
        """Stop playback quietly; queue and cursor are kept for a later ``play``."""
        self._release_handle()
        self.queue.active = False
