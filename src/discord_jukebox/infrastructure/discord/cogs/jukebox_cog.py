"""Prefix command listener: turns chat messages into dispatched commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_jukebox.application.commands.dispatcher import ERROR_REACTION, CommandContext
from discord_jukebox.application.commands.help import HelpTopic, render_help
from discord_jukebox.application.commands.parser import parse_command_line
from discord_jukebox.application.interfaces.track_resolver import Requester
from discord_jukebox.domain.shared.exceptions import (
    CommandChannelError,
    ExecutionError,
    UsageError,
)
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.discord.adapters.channel_output import MessageReply

if TYPE_CHECKING:
    from ....application.commands.dispatcher import CommandDispatcher
    from ....config.container import Container

logger = logging.getLogger(__name__)


class JukeboxCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container
        self._command_channels = frozenset(container.settings.discord.command_channel_ids)

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self.container.dispatcher

    def strip_prefix(self, content: str) -> str | None:
        """Return the command line after the prefix, or None if *content* is no command."""
        prefix = self.dispatcher.prefix
        if content.startswith(prefix):
            return content[len(prefix):]
        if content.strip() == prefix.strip():
            return ""
        return None

    def _check_channel(self, channel_id: int) -> None:
        if self._command_channels and channel_id not in self._command_channels:
            raise CommandChannelError(ErrorMessages.NOT_IN_COMMAND_CHANNEL, channel_id)

    @staticmethod
    async def _react(message: discord.Message, emoji: str) -> None:
        try:
            await message.add_reaction(emoji)
        except discord.HTTPException as e:
            logger.debug(LogTemplates.COMMAND_REACTION_FAILED, e)

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or message.guild is None:
            return

        command_line = self.strip_prefix(message.content)
        if command_line is None:
            return

        await self.handle_command(message, command_line)

    async def handle_command(self, message: discord.Message, command_line: str) -> None:
        """Parse, dispatch and acknowledge one command; errors are shown in the channel."""
        assert message.guild is not None
        guild_id = message.guild.id
        reply = MessageReply(message.channel, message.channel.id)

        try:
            self._check_channel(message.channel.id)
            command = parse_command_line(command_line)

            voice = getattr(message.author, "voice", None)
            voice_channel = voice.channel if voice is not None else None
            context = CommandContext(
                guild_id=guild_id,
                channel_id=message.channel.id,
                requester=Requester(
                    user_id=message.author.id, name=message.author.display_name
                ),
                reply=reply,
                voice_channel_id=voice_channel.id if voice_channel is not None else None,
            )
            reaction = await self.dispatcher.dispatch(command, context)
        except UsageError as e:
            logger.info(LogTemplates.COMMAND_USAGE_ERROR, guild_id, e.message)
            topic = HelpTopic.lookup(e.topic) or HelpTopic.GENERAL
            await reply.print(f"{e.message}\n\n{render_help(topic, self.dispatcher.prefix)}")
            await self._react(message, ERROR_REACTION)
            return
        except ExecutionError as e:
            logger.info(LogTemplates.COMMAND_EXECUTION_ERROR, guild_id, e.message)
            await reply.print(e.message)
            await self._react(message, ERROR_REACTION)
            return
        except Exception as e:
            logger.exception(LogTemplates.COMMAND_UNEXPECTED_ERROR, command_line, guild_id)
            await reply.print(ErrorMessages.INTERNAL_ERROR.format(error=e))
            await self._react(message, ERROR_REACTION)
            return

        if reaction is not None:
            await self._react(message, reaction)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(JukeboxCog(bot, container))
