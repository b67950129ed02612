"""Port interfaces for voice connections and audio playback."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from discord_jukebox.domain.shared.types import ChannelIdField, DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class PlaybackHandle(ABC):
    """A single playback session started by a :class:`PlaybackAdapter`.

    All control methods raise :class:`AdapterError` when the backend refuses
    the request.  Stopping a handle never produces an ended notification.
    """

    @abstractmethod
    def stop(self) -> None:
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def resume(self) -> None:
        ...

    @abstractmethod
    def seek(self, position: float) -> None:
        """Continue playback at *position* seconds from the start of the track."""
        ...

    @abstractmethod
    def current_position(self) -> float:
        """Playback position in seconds."""
        ...


TrackEndCallback = Callable[[DiscordSnowflake, PlaybackHandle], Awaitable[None]]


class PlaybackAdapter(ABC):
    """Interface for voice channel connections and track playback."""

    @abstractmethod
    async def connect(self, guild_id: DiscordSnowflake, channel_id: ChannelIdField) -> None:
        """Connect (or move) to a voice channel."""
        ...

    @abstractmethod
    async def disconnect(self, guild_id: DiscordSnowflake) -> None:
        """Disconnect from voice in a guild."""
        ...

    @abstractmethod
    def is_connected(self, guild_id: DiscordSnowflake) -> bool:
        ...

    @abstractmethod
    async def start(self, guild_id: DiscordSnowflake, track: "Track") -> PlaybackHandle:
        """Start playing *track* and return the handle controlling it."""
        ...

    @abstractmethod
    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None:
        """Set callback invoked exactly once when a handle finishes naturally."""
        ...
