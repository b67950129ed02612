"""OutputSink implementations backed by Discord text channels."""

from __future__ import annotations

import logging

import discord

from discord_jukebox.application.interfaces.output_sink import OutputSink
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.utils.reply import chunk_message

logger = logging.getLogger(__name__)


class ChannelOutput(OutputSink):
    """Sends text to one channel, split into chunks Discord accepts.

    A ``fixed`` output keeps its configured channel; otherwise
    :meth:`adopt_channel` redirects it, e.g. to the channel ``join`` was
    issued in.  Without a channel, text is dropped with a debug log.
    """

    def __init__(self, bot: discord.Client, channel_id: int | None = None, *, fixed: bool = False) -> None:
        self._bot = bot
        self._channel_id = channel_id
        self._fixed = fixed and channel_id is not None

    @property
    def channel_id(self) -> int | None:
        return self._channel_id

    def adopt_channel(self, channel_id: int) -> None:
        if not self._fixed:
            self._channel_id = channel_id

    def _get_channel(self) -> discord.abc.Messageable | None:
        if self._channel_id is None:
            return None
        channel = self._bot.get_channel(self._channel_id)
        return channel if isinstance(channel, discord.abc.Messageable) else None

    async def print(self, text: str) -> None:
        channel = self._get_channel()
        if channel is None:
            logger.debug(LogTemplates.OUTPUT_SEND_FAILED, self._channel_id, "channel unavailable")
            return

        for chunk in chunk_message(text):
            try:
                await channel.send(chunk)
            except discord.HTTPException as e:
                logger.warning(LogTemplates.OUTPUT_SEND_FAILED, self._channel_id, e)
                return


class MessageReply(OutputSink):
    """Replies into the channel a command message was posted in."""

    def __init__(self, channel: discord.abc.Messageable, channel_id: int) -> None:
        self._channel = channel
        self._channel_id = channel_id

    async def print(self, text: str) -> None:
        for chunk in chunk_message(text):
            try:
                await self._channel.send(chunk)
            except discord.HTTPException as e:
                logger.warning(LogTemplates.OUTPUT_SEND_FAILED, self._channel_id, e)
                return
