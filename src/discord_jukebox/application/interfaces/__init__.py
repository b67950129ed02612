"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from discord_jukebox.application.interfaces.output_sink import OutputSink
from discord_jukebox.application.interfaces.playback_adapter import (
    PlaybackAdapter,
    PlaybackHandle,
)
from discord_jukebox.application.interfaces.track_resolver import (
    Requester,
    TrackResolution,
    TrackResolver,
)

__all__ = [
    "OutputSink",
    "PlaybackAdapter",
    "PlaybackHandle",
    "Requester",
    "TrackResolution",
    "TrackResolver",
]
