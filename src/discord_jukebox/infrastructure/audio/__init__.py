"""Audio infrastructure - Audiotool client and resolvers, yt-dlp fallback."""

from discord_jukebox.infrastructure.audio.audiotool_client import AudiotoolClient
from discord_jukebox.infrastructure.audio.audiotool_resolver import (
    AudiotoolAlbumResolver,
    AudiotoolGenreChartsResolver,
    AudiotoolSingleChartsResolver,
    AudiotoolTrackResolver,
)
from discord_jukebox.infrastructure.audio.models import (
    AudioFormatInfo,
    AudiotoolListing,
    AudiotoolTrackDetails,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from discord_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "AudiotoolAlbumResolver",
    "AudiotoolClient",
    "AudiotoolGenreChartsResolver",
    "AudiotoolListing",
    "AudiotoolSingleChartsResolver",
    "AudiotoolTrackDetails",
    "AudiotoolTrackResolver",
    "CacheEntry",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
