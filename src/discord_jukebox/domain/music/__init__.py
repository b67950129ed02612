"""
Music Bounded Context

Domain logic for track addressing, fair queue ordering, and queue mutations.
"""

from discord_jukebox.domain.music.entities import QueueEntry, Track
from discord_jukebox.domain.music.fairness import promote_deferred
from discord_jukebox.domain.music.queue import PlaybackQueue
from discord_jukebox.domain.music.selection import (
    IndexAnchor,
    IndexResolution,
    ResolutionKind,
    TrackIndex,
    TrackIndexRange,
    TrackIndexSelection,
)
from discord_jukebox.domain.music.value_objects import QueueChange, WaitEstimate

__all__ = [
    # Entities
    "Track",
    "QueueEntry",
    "PlaybackQueue",
    # Addressing
    "IndexAnchor",
    "IndexResolution",
    "ResolutionKind",
    "TrackIndex",
    "TrackIndexRange",
    "TrackIndexSelection",
    # Value Objects
    "QueueChange",
    "WaitEstimate",
    # Services
    "promote_deferred",
]
