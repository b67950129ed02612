"""
Application Commands

Parsing of chat command lines, help pages, and the dispatcher that
executes parsed commands against a guild's player.
"""

from discord_jukebox.application.commands.dispatcher import (
    ERROR_REACTION,
    REACTIONS,
    CommandContext,
    CommandDispatcher,
)
from discord_jukebox.application.commands.help import HelpTopic, render_help
from discord_jukebox.application.commands.parser import (
    Command,
    CommandKind,
    parse_command_line,
    parse_enqueue_requests,
)

__all__ = [
    # Parsing
    "Command",
    "CommandKind",
    "parse_command_line",
    "parse_enqueue_requests",
    # Help
    "HelpTopic",
    "render_help",
    # Dispatch
    "CommandContext",
    "CommandDispatcher",
    "REACTIONS",
    "ERROR_REACTION",
]
