"""
Shared Domain Kernel

Contains exceptions, messages, and constrained types shared across the project.
"""

from discord_jukebox.domain.shared.exceptions import (
    AdapterError,
    CommandChannelError,
    DomainError,
    ExecutionError,
    UsageError,
    VoiceChannelRequiredError,
)

__all__ = [
    "DomainError",
    "UsageError",
    "ExecutionError",
    "AdapterError",
    "VoiceChannelRequiredError",
    "CommandChannelError",
]
