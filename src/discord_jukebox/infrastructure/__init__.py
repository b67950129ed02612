"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, playback adapter, channel output)
- Audio (Audiotool HTTP client and resolvers, yt-dlp fallback)
"""

from discord_jukebox.infrastructure.discord.adapters.playback_adapter import (
    DiscordPlaybackAdapter,
)
from discord_jukebox.infrastructure.discord.bot import create_bot

__all__ = [
    "create_bot",
    "DiscordPlaybackAdapter",
]
