"""Dependency Injection Container

Owns the object graph of the jukebox: the guild registry, the track
resolvers, the playback adapter and the command dispatcher.  Components are
created on first access and cached; ``initialize``/``shutdown`` manage the
resources that need an event loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.dispatcher import CommandDispatcher
    from ..application.interfaces.output_sink import OutputSink
    from ..application.interfaces.playback_adapter import PlaybackAdapter
    from ..application.interfaces.track_resolver import TrackResolver
    from ..application.services.enqueue_service import EnqueueService
    from ..application.services.guild_registry import GuildRegistry
    from ..application.services.track_resolution import ResolverChain
    from ..infrastructure.audio.audiotool_client import AudiotoolClient
    from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.  Anything that
    talks to Discord needs :meth:`set_bot` to have been called first.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure
    _audiotool_client: AudiotoolClient | None = None
    _ytdlp_resolver: YtDlpResolver | None = None
    _playback_adapter: PlaybackAdapter | None = None

    # Application
    _resolver_chain: ResolverChain | None = None
    _registry: GuildRegistry | None = None
    _enqueue_service: EnqueueService | None = None
    _dispatcher: CommandDispatcher | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure ===

    @property
    def audiotool_client(self) -> AudiotoolClient:
        if self._audiotool_client is None:
            from ..infrastructure.audio.audiotool_client import AudiotoolClient

            self._audiotool_client = AudiotoolClient(self.settings.audiotool)
        return self._audiotool_client

    @property
    def ytdlp_resolver(self) -> YtDlpResolver:
        if self._ytdlp_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._ytdlp_resolver = YtDlpResolver(self.settings.audio)
        return self._ytdlp_resolver

    @property
    def resolvers(self) -> list[TrackResolver]:
        """Resolvers in the order they are consulted; yt-dlp is the catch-all."""
        from ..infrastructure.audio.audiotool_resolver import (
            AudiotoolAlbumResolver,
            AudiotoolGenreChartsResolver,
            AudiotoolSingleChartsResolver,
            AudiotoolTrackResolver,
        )

        client = self.audiotool_client
        return [
            AudiotoolTrackResolver(client),
            AudiotoolSingleChartsResolver(client),
            AudiotoolGenreChartsResolver(client),
            AudiotoolAlbumResolver(client),
            self.ytdlp_resolver,
        ]

    @property
    def playback_adapter(self) -> PlaybackAdapter:
        """Get the Discord voice playback adapter."""
        if self._playback_adapter is None:
            from ..infrastructure.discord.adapters.playback_adapter import (
                DiscordPlaybackAdapter,
            )

            self._playback_adapter = DiscordPlaybackAdapter(
                self.bot,
                self.settings.audio,
                stream_locator=self.ytdlp_resolver.fresh_stream_url,
            )
        return self._playback_adapter

    def guild_output(self, guild_id: int) -> OutputSink:
        """Announcement sink for *guild_id*; configured channels are never replaced."""
        from ..infrastructure.discord.adapters.channel_output import ChannelOutput

        channel_id = self.settings.discord.announce_channel_ids.get(guild_id)
        return ChannelOutput(self.bot, channel_id, fixed=channel_id is not None)

    # === Application ===

    @property
    def resolver_chain(self) -> ResolverChain:
        if self._resolver_chain is None:
            from ..application.services.track_resolution import ResolverChain

            self._resolver_chain = ResolverChain(self.resolvers)
        return self._resolver_chain

    @property
    def registry(self) -> GuildRegistry:
        """Get the per-guild player registry."""
        if self._registry is None:
            from ..application.services.guild_registry import GuildRegistry

            queue_settings = self.settings.queue
            self._registry = GuildRegistry(
                self.playback_adapter,
                self.guild_output,
                default_quota=queue_settings.default_quota,
                print_before=queue_settings.print_before,
                print_after=queue_settings.print_after,
            )
        return self._registry

    @property
    def enqueue_service(self) -> EnqueueService:
        if self._enqueue_service is None:
            from ..application.services.enqueue_service import EnqueueService

            self._enqueue_service = EnqueueService(
                resolver=self.resolver_chain,
                registry=self.registry,
            )
        return self._enqueue_service

    @property
    def dispatcher(self) -> CommandDispatcher:
        """Get the command dispatcher used by the cog."""
        if self._dispatcher is None:
            from ..application.commands.dispatcher import CommandDispatcher

            self._dispatcher = CommandDispatcher(
                registry=self.registry,
                enqueue_service=self.enqueue_service,
                adapter=self.playback_adapter,
                prefix=self.settings.discord.command_prefix,
            )
        return self._dispatcher

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Start background work; the first keep-alive runs immediately."""
        self.audiotool_client.start_keep_alive(self.settings.audiotool.keep_alive_interval_s)

    async def shutdown(self) -> None:
        """Stop playback in every guild and release network resources."""
        if self._registry is not None:
            await self._registry.shutdown()

        if self._audiotool_client is not None:
            await self._audiotool_client.aclose()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
