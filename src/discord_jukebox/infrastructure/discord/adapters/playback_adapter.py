"""Discord voice adapter implementing PlaybackAdapter with FFmpeg sources."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import discord

from discord_jukebox.application.interfaces.playback_adapter import (
    PlaybackAdapter,
    PlaybackHandle,
    TrackEndCallback,
)
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.shared.exceptions import AdapterError, VoiceChannelRequiredError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....domain.music.entities import Track

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0

StreamLocator = Callable[["Track"], Awaitable[str]]


class FFmpegPlaybackHandle(PlaybackHandle):
    """One track played through a guild's voice client.

    Seeking replaces the FFmpeg process; every replaced or stopped source
    bumps ``_generation`` so its ``after`` callback is ignored.  Only the
    natural end of the live source reaches the adapter.
    """

    def __init__(
        self,
        adapter: DiscordPlaybackAdapter,
        guild_id: int,
        voice_client: discord.VoiceClient,
        track: Track,
        stream_url: str,
    ) -> None:
        self._adapter = adapter
        self.guild_id = guild_id
        self.track = track
        self._vc = voice_client
        self._stream_url = stream_url

        self._lock = threading.Lock()
        self._generation = 0
        self._stopped = False
        self._offset = 0.0
        self._started_at = time.monotonic()
        self._paused_at: float | None = None

    @property
    def stopped(self) -> bool:
        return self._stopped

    def _play_from(self, offset: float) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation

        def after_callback(error: Exception | None = None) -> None:
            logger.debug(LogTemplates.TRACK_ENDED, self.guild_id, error)
            if error:
                logger.warning(LogTemplates.PLAYBACK_ERROR, self.guild_id, error)
            with self._lock:
                if self._stopped or generation != self._generation:
                    return
                self._stopped = True
            self._adapter.notify_track_end(self)

        try:
            source = self._adapter.create_source(self._stream_url, offset)
            self._vc.play(source, after=after_callback)
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            with self._lock:
                self._stopped = True
            raise AdapterError(ErrorMessages.PLAYBACK_START_FAILED.format(error=e)) from e

        self._offset = offset
        self._started_at = time.monotonic()
        self._paused_at = None

    def _ensure_live(self) -> None:
        if self._stopped:
            raise AdapterError(ErrorMessages.PLAYBACK_ALREADY_STOPPED)

    def _halt_source(self) -> None:
        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()

    def stop(self) -> None:
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            self._generation += 1
        if self._adapter.is_current(self):
            self._halt_source()
        logger.info(LogTemplates.PLAYBACK_STOPPED, self.guild_id)

    def pause(self) -> None:
        self._ensure_live()
        if self._paused_at is not None:
            return
        self._vc.pause()
        self._paused_at = time.monotonic()
        logger.info(LogTemplates.PLAYBACK_PAUSED, self.guild_id)

    def resume(self) -> None:
        self._ensure_live()
        if self._paused_at is None:
            return
        self._vc.resume()
        self._started_at += time.monotonic() - self._paused_at
        self._paused_at = None
        logger.info(LogTemplates.PLAYBACK_RESUMED, self.guild_id)

    def seek(self, position: float) -> None:
        self._ensure_live()
        position = max(0.0, position)
        was_paused = self._paused_at is not None

        with self._lock:
            self._generation += 1
        self._halt_source()
        self._play_from(position)
        if was_paused:
            self._vc.pause()
            self._paused_at = self._started_at
        logger.info(LogTemplates.PLAYBACK_SEEKED, position, self.guild_id)

    def current_position(self) -> float:
        self._ensure_live()
        now = self._paused_at if self._paused_at is not None else time.monotonic()
        return self._offset + max(0.0, now - self._started_at)


class DiscordPlaybackAdapter(PlaybackAdapter):
    def __init__(
        self,
        bot: discord.Client,
        settings: AudioSettings | None = None,
        *,
        stream_locator: StreamLocator | None = None,
    ) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()
        self._volume = self._settings.default_volume
        self._ffmpeg_options = self._settings.ffmpeg_options
        self._stream_locator = stream_locator
        self._on_track_end: TrackEndCallback | None = None
        self._handles: dict[int, FFmpegPlaybackHandle] = {}

    def _get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    def _get_voice_channel(
        self, guild_id: int, channel_id: int
    ) -> tuple[discord.Guild, discord.VoiceChannel | discord.StageChannel]:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            raise AdapterError(ErrorMessages.GUILD_NOT_FOUND.format(guild_id=guild_id))

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            raise AdapterError(ErrorMessages.CHANNEL_NOT_VOICE.format(channel_id=channel_id))
        return guild, channel

    # === Connection ===

    async def connect(self, guild_id: int, channel_id: int) -> None:
        """Connect, or move when already connected elsewhere in the guild.

        Raises:
            AdapterError: If the channel is unusable or the connection fails.
        """
        guild, channel = self._get_voice_channel(guild_id, channel_id)

        vc = self._get_voice_client(guild_id)
        if vc and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await self.disconnect(guild_id)
            vc = None

        if vc and vc.channel and vc.channel.id == channel_id:
            return

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                if vc:
                    await vc.move_to(channel)
                else:
                    await channel.connect(self_deaf=True)
        except TimeoutError as e:
            template = LogTemplates.VOICE_MOVE_TIMEOUT if vc else LogTemplates.VOICE_CONNECTION_TIMEOUT
            logger.error(template, channel_id)
            raise AdapterError(ErrorMessages.VOICE_CONNECT_TIMEOUT) from e
        except discord.Forbidden as e:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            raise AdapterError(ErrorMessages.VOICE_NO_PERMISSION) from e
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            raise AdapterError(ErrorMessages.VOICE_CONNECT_FAILED.format(error=e)) from e

        await self._ensure_self_deaf(guild, channel)
        if vc:
            logger.info(LogTemplates.VOICE_MOVED, channel.name)
        else:
            logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)

    async def _ensure_self_deaf(
        self,
        guild: discord.Guild,
        channel: discord.VoiceChannel | discord.StageChannel,
    ) -> None:
        try:
            await guild.change_voice_state(channel=channel, self_deaf=True)
        except discord.HTTPException as exc:
            logger.debug(LogTemplates.VOICE_SELF_DEAFEN_FAILED, guild.id, exc)

    async def disconnect(self, guild_id: int) -> None:
        handle = self._handles.pop(guild_id, None)
        if handle is not None:
            handle.stop()

        vc = self._get_voice_client(guild_id)
        if not vc:
            return

        await vc.disconnect(force=True)
        logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)

    def is_connected(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        return vc is not None and vc.is_connected()

    # === Playback ===

    def create_source(self, stream_url: str, offset: float = 0.0) -> discord.AudioSource:
        before_opts = self._ffmpeg_options.get("before_options", "")
        if offset > 0:
            before_opts = f"{before_opts} -ss {offset:.3f}".strip()

        source = discord.FFmpegPCMAudio(
            stream_url,
            before_options=before_opts,
            options=self._ffmpeg_options.get("options", ""),
        )
        return discord.PCMVolumeTransformer(source, volume=self._volume)

    async def start(self, guild_id: int, track: Track) -> FFmpegPlaybackHandle:
        vc = self._get_voice_client(guild_id)
        if not vc or not vc.is_connected():
            logger.warning(LogTemplates.VOICE_NOT_CONNECTED, guild_id)
            raise VoiceChannelRequiredError(ErrorMessages.BOT_VOICE_CHANNEL_REQUIRED, bot=True)

        stream_url = track.stream_url
        if self._stream_locator is not None:
            stream_url = await self._stream_locator(track)

        previous = self._handles.pop(guild_id, None)
        if previous is not None:
            previous.stop()
        if vc.is_playing() or vc.is_paused():
            vc.stop()

        handle = FFmpegPlaybackHandle(self, guild_id, vc, track, stream_url)
        handle._play_from(0.0)
        self._handles[guild_id] = handle
        logger.info(LogTemplates.PLAYBACK_STARTED, track.title, guild_id)
        return handle

    def is_current(self, handle: FFmpegPlaybackHandle) -> bool:
        return self._handles.get(handle.guild_id) is handle

    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None:
        self._on_track_end = callback

    def notify_track_end(self, handle: FFmpegPlaybackHandle) -> None:
        """Called from the audio thread; hops onto the bot's event loop."""
        asyncio.run_coroutine_threadsafe(self._handle_track_end(handle), self._bot.loop)

    async def _handle_track_end(self, handle: FFmpegPlaybackHandle) -> None:
        if self.is_current(handle):
            del self._handles[handle.guild_id]

        if self._on_track_end is None:
            logger.warning(LogTemplates.PLAYBACK_NO_CALLBACK, handle.guild_id)
            return

        try:
            await self._on_track_end(handle.guild_id, handle)
        except Exception as e:
            logger.error(LogTemplates.PLAYBACK_CALLBACK_ERROR, handle.guild_id, e)
