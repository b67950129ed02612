"""Command dispatcher - executes parsed commands against a guild's player."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from ...domain.shared.exceptions import VoiceChannelRequiredError
from ...domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .help import render_help
from .parser import Command, CommandKind

if TYPE_CHECKING:
    from ..interfaces.output_sink import OutputSink
    from ..interfaces.playback_adapter import PlaybackAdapter
    from ..interfaces.track_resolver import Requester
    from ..services.enqueue_service import EnqueueService
    from ..services.guild_player import GuildPlayer
    from ..services.guild_registry import GuildRegistry

logger = logging.getLogger(__name__)

REACTIONS: Final[dict[CommandKind, str]] = {
    CommandKind.JOIN: "🎧",
    CommandKind.LEAVE: "👋",
    CommandKind.ENQUEUE: "✅",
    CommandKind.PAUSE: "⏸",
    CommandKind.RESUME: "⏯",
    CommandKind.PLAY: "🔊",
    CommandKind.STOP: "⏹",
    CommandKind.GOTO: "⏬",
    CommandKind.NEXT: "⏭",
    CommandKind.PREV: "⏮",
    CommandKind.REMOVE: "❎",
    CommandKind.SEEK: "🔎",
    CommandKind.REVERSE: "🔃",
    CommandKind.QUOTA: "🛑",
    CommandKind.MOVE: "🔀",
}
ERROR_REACTION: Final[str] = "🚫"


@dataclass(frozen=True)
class CommandContext:
    """Where a command came from and where replies go."""

    guild_id: DiscordSnowflake
    channel_id: DiscordSnowflake
    requester: Requester
    reply: OutputSink
    voice_channel_id: DiscordSnowflake | None = None


class CommandDispatcher:
    """Runs commands under the guild lock and returns the acknowledgement reaction.

    Domain errors propagate to the caller, which presents them to the user.
    """

    def __init__(
        self,
        *,
        registry: GuildRegistry,
        enqueue_service: EnqueueService,
        adapter: PlaybackAdapter,
        prefix: str,
    ) -> None:
        self._registry = registry
        self._enqueue = enqueue_service
        self._adapter = adapter
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    async def dispatch(self, command: Command, context: CommandContext) -> str | None:
        logger.debug(
            LogTemplates.COMMAND_RECEIVED,
            command.kind.value,
            context.requester.name,
            context.guild_id,
        )
        if command.requires_voice and context.voice_channel_id is None:
            raise VoiceChannelRequiredError(ErrorMessages.USER_VOICE_CHANNEL_REQUIRED)

        kind = command.kind
        if kind is CommandKind.HELP:
            await context.reply.print(render_help(command.topic, self._prefix))
            return None

        if kind is CommandKind.ENQUEUE:
            # Resolution does network I/O and must not hold the guild lock.
            result = await self._enqueue.enqueue(
                context.guild_id, command.requests, context.requester
            )
            if result.notices:
                await context.reply.print("\n".join(result.notices))
            return REACTIONS[kind]

        handle = await self._registry.get(context.guild_id)
        async with handle.locked() as player:
            shown = await self._run(player, command, context)
        return None if shown else REACTIONS.get(kind)

    async def _run(self, player: GuildPlayer, command: Command, context: CommandContext) -> bool:
        """Execute *command*; returns True for pure reports that get no reaction."""
        kind = command.kind
        reply = context.reply

        if kind is CommandKind.JOIN:
            assert context.voice_channel_id is not None
            await self._adapter.connect(context.guild_id, context.voice_channel_id)
            player.output.adopt_channel(context.channel_id)
            await player.output.print(DiscordUIMessages.GREETING_JOINED)
        elif kind is CommandKind.LEAVE:
            await player.shutdown()
            await self._adapter.disconnect(context.guild_id)
        elif kind is CommandKind.PAUSE:
            player.pause()
        elif kind is CommandKind.RESUME:
            player.resume()
        elif kind is CommandKind.PLAY:
            await player.play()
        elif kind is CommandKind.STOP:
            await player.stop()
        elif kind is CommandKind.PRINT:
            await player.print(reply, command.selection)
            return True
        elif kind is CommandKind.GOTO:
            assert command.index is not None
            await player.goto(command.index)
        elif kind is CommandKind.NEXT:
            await player.next()
        elif kind is CommandKind.PREV:
            await player.prev()
        elif kind is CommandKind.REMOVE:
            assert command.selection is not None
            await player.remove(reply, command.selection)
        elif kind is CommandKind.SEEK:
            assert command.seconds is not None
            player.seek(float(command.seconds))
        elif kind is CommandKind.NOW:
            await player.now(reply)
            return True
        elif kind is CommandKind.REVERSE:
            assert command.selection is not None
            await player.reverse(reply, command.selection)
        elif kind is CommandKind.QUOTA:
            if command.quota is None:
                await player.print_quota(reply)
                return True
            player.set_quota(command.quota)
        elif kind is CommandKind.MOVE:
            assert command.selection is not None and command.index is not None
            await player.move(reply, command.selection, command.index)
        elif kind is CommandKind.WHEN:
            assert command.index is not None
            await player.when(reply, command.index)
            return True
        return False
