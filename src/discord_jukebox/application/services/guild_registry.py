"""Guild Registry - lazily created players, one lock per guild."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import ExecutionError
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .guild_player import DEFAULT_PRINT_AFTER, DEFAULT_PRINT_BEFORE, GuildPlayer

if TYPE_CHECKING:
    from ..interfaces.output_sink import OutputSink
    from ..interfaces.playback_adapter import PlaybackAdapter, PlaybackHandle

logger = logging.getLogger(__name__)

OutputFactory = Callable[[DiscordSnowflake], "OutputSink"]


@dataclass
class GuildHandle:
    """A guild's player together with the lock serializing access to it."""

    player: GuildPlayer
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @asynccontextmanager
    async def locked(self) -> AsyncIterator[GuildPlayer]:
        async with self.lock:
            yield self.player


class GuildRegistry:
    """Maps guild ids to their :class:`GuildHandle`.

    The registry lock only covers lookup and insertion; all work on a player
    happens under the guild's own lock so guilds never block each other.
    Handles live for the lifetime of the process.
    """

    def __init__(
        self,
        adapter: PlaybackAdapter,
        output_factory: OutputFactory,
        *,
        default_quota: int | None = None,
        print_before: int = DEFAULT_PRINT_BEFORE,
        print_after: int = DEFAULT_PRINT_AFTER,
    ) -> None:
        self._adapter = adapter
        self._output_factory = output_factory
        self._default_quota = default_quota
        self._print_before = print_before
        self._print_after = print_after

        self._lock = asyncio.Lock()
        self._handles: dict[DiscordSnowflake, GuildHandle] = {}

        self._adapter.set_on_track_end_callback(self.handle_track_end)

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._handles

    async def get(self, guild_id: DiscordSnowflake) -> GuildHandle:
        async with self._lock:
            handle = self._handles.get(guild_id)
            if handle is None:
                player = GuildPlayer(
                    guild_id,
                    adapter=self._adapter,
                    output=self._output_factory(guild_id),
                    default_quota=self._default_quota,
                    print_before=self._print_before,
                    print_after=self._print_after,
                )
                handle = GuildHandle(player)
                self._handles[guild_id] = handle
                logger.info(LogTemplates.REGISTRY_PLAYER_CREATED, guild_id)
            return handle

    async def handle_track_end(self, guild_id: DiscordSnowflake, playback: PlaybackHandle) -> None:
        """Advance the guild's queue after *playback* finished on its own."""
        handle = await self.get(guild_id)
        async with handle.locked() as player:
            try:
                await player.advance(playback)
            except ExecutionError as e:
                logger.warning(LogTemplates.PLAYBACK_RESTART_FAILED, guild_id, e)
                await player.output.print(DiscordUIMessages.ERROR_PREFIX.format(message=e.message))

    async def shutdown(self) -> None:
        async with self._lock:
            handles = list(self._handles.values())

        for handle in handles:
            async with handle.locked() as player:
                await player.shutdown()
        logger.info(LogTemplates.REGISTRY_SHUTDOWN, len(handles))
