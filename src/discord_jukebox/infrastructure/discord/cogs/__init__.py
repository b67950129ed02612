"""Discord cogs - command handlers."""

from discord_jukebox.infrastructure.discord.cogs.jukebox_cog import JukeboxCog

__all__ = [
    "JukeboxCog",
]
