"""
Unit Tests for Discord Output Sinks

Tests for:
- ChannelOutput channel adoption and fixed announce channels
- Chunked sending and swallowed HTTP failures
- MessageReply answering in the command's channel
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from discord_jukebox.infrastructure.discord.adapters.channel_output import (
    ChannelOutput,
    MessageReply,
)


def _text_channel():
    channel = MagicMock(spec=discord.TextChannel)
    channel.send = AsyncMock()
    return channel


@pytest.fixture
def channel():
    return _text_channel()


@pytest.fixture
def mock_bot(channel):
    bot = MagicMock()
    bot.get_channel.return_value = channel
    return bot


class TestChannelOutput:
    @pytest.mark.asyncio
    async def test_prints_to_channel(self, mock_bot, channel):
        output = ChannelOutput(mock_bot, 42)

        await output.print("hello")

        mock_bot.get_channel.assert_called_with(42)
        channel.send.assert_awaited_once_with("hello")

    @pytest.mark.asyncio
    async def test_without_channel_drops_text(self, mock_bot, channel):
        output = ChannelOutput(mock_bot)

        await output.print("hello")

        assert output.channel_id is None
        channel.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_messageable_channel(self, mock_bot):
        mock_bot.get_channel.return_value = MagicMock(spec=discord.CategoryChannel)
        output = ChannelOutput(mock_bot, 42)

        await output.print("hello")

    @pytest.mark.asyncio
    async def test_adopt_channel(self, mock_bot):
        output = ChannelOutput(mock_bot)

        output.adopt_channel(7)

        assert output.channel_id == 7

    @pytest.mark.asyncio
    async def test_fixed_channel_is_kept(self, mock_bot):
        """Should ignore the join channel when an announce channel is configured."""
        output = ChannelOutput(mock_bot, 42, fixed=True)

        output.adopt_channel(7)

        assert output.channel_id == 42

    @pytest.mark.asyncio
    async def test_fixed_without_channel_can_adopt(self, mock_bot):
        output = ChannelOutput(mock_bot, None, fixed=True)

        output.adopt_channel(7)

        assert output.channel_id == 7

    @pytest.mark.asyncio
    async def test_long_text_is_chunked(self, mock_bot, channel):
        output = ChannelOutput(mock_bot, 42)
        text = "\n".join(f"line {i:04d} " + "x" * 90 for i in range(60))

        await output.print(text)

        sent = [call.args[0] for call in channel.send.await_args_list]
        assert len(sent) > 1
        assert all(len(chunk) < 2000 for chunk in sent)
        assert "\n".join(sent) == text

    @pytest.mark.asyncio
    async def test_http_error_stops_sending(self, mock_bot, channel):
        channel.send = AsyncMock(side_effect=discord.HTTPException(MagicMock(), "rate limited"))
        output = ChannelOutput(mock_bot, 42)

        await output.print("\n".join("y" * 100 for _ in range(40)))

        channel.send.assert_awaited_once()


class TestMessageReply:
    @pytest.mark.asyncio
    async def test_reply(self, channel):
        reply = MessageReply(channel, 42)

        await reply.print("done")

        channel.send.assert_awaited_once_with("done")

    @pytest.mark.asyncio
    async def test_reply_http_error(self, channel):
        channel.send = AsyncMock(side_effect=discord.HTTPException(MagicMock(), "missing access"))
        reply = MessageReply(channel, 42)

        await reply.print("done")

    @pytest.mark.asyncio
    async def test_adopt_channel_is_noop(self, channel):
        reply = MessageReply(channel, 42)

        assert reply.adopt_channel(7) is None
