"""TrackResolver fallback using yt-dlp for any other http(s) URL."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from collections import OrderedDict
from typing import Any, Final, cast

from pydantic import ValidationError
from yt_dlp import YoutubeDL
from yt_dlp.utils import YoutubeDLError

from discord_jukebox.application.interfaces.track_resolver import (
    Requester,
    TrackResolution,
    TrackResolver,
)
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    RESOLVED_PAGES_MAX_SIZE,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

LOG_URL_TRUNCATE: Final[int] = 60

URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"https?://\S+")


class YtDlpResolver(TrackResolver):
    """Claims every http(s) URL and lets yt-dlp find an audio stream for it.

    Direct media URLs expire, so :meth:`fresh_stream_url` re-extracts them
    right before playback once the cached result is older than ``CACHE_TTL``.
    """

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format)
        self._cache: dict[str, CacheEntry] = {}
        self._resolved_pages: OrderedDict[str, None] = OrderedDict()

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    def _prune_cache(self, now: float) -> None:
        if len(self._cache) <= CACHE_MAX_SIZE:
            return
        expired = [k for k, entry in self._cache.items() if now - entry.cached_at >= CACHE_TTL]
        for k in expired:
            self._cache.pop(k, None)
        if expired:
            logger.debug(LogTemplates.YTDLP_CACHE_CLEANED, len(expired))

    def _remember_page(self, page_url: str) -> None:
        """Mark *page_url* as refreshable, forgetting the oldest pages past the limit."""
        self._resolved_pages[page_url] = None
        self._resolved_pages.move_to_end(page_url)
        while len(self._resolved_pages) > RESOLVED_PAGES_MAX_SIZE:
            self._resolved_pages.popitem(last=False)

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        """Blocking extraction; raises :class:`YoutubeDLError` on failure."""
        now = time.time()
        cached = self._cache.get(url)
        if cached is not None:
            if now - cached.cached_at < CACHE_TTL:
                logger.debug(LogTemplates.YTDLP_CACHE_HIT, url[:LOG_URL_TRUNCATE])
                return cached.info
            self._cache.pop(url, None)

        with YoutubeDL(params=cast(Any, self._base_opts.model_dump())) as ydl:
            data = ydl.extract_info(url, download=False)
        result = self._parse_info(dict(data)) if isinstance(data, dict) else None

        self._cache[url] = CacheEntry(info=result, cached_at=now)
        self._prune_cache(now)
        return result

    def _info_to_track(
        self, reference: str, info: YtDlpTrackInfo, comment: str | None, requester: Requester
    ) -> TrackResolution:
        stream_url = info.stream_url
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, reference)
            return TrackResolution.failed(
                ErrorMessages.NO_STREAM_URL_FOR_TRACK.format(reference=reference)
            )

        try:
            track = Track(
                stream_url=stream_url,
                webpage_url=info.webpage_url or reference,
                title=info.title,
                artist=info.performer,
                genre=info.genre,
                thumbnail_url=info.thumbnail,
                duration_seconds=info.duration,
                comment=comment or None,
                requested_by_id=requester.user_id,
                requested_by_name=requester.name,
            )
        except ValidationError as e:
            logger.warning(LogTemplates.RESOLVER_ITEM_FAILED, reference, e)
            return TrackResolution.failed(
                ErrorMessages.RESOLUTION_FAILED.format(reference=reference, error=e)
            )

        self._remember_page(track.webpage_url)
        return TrackResolution.ok(track)

    async def resolve(
        self, reference: str, comment: str | None, requester: Requester
    ) -> list[TrackResolution] | None:
        if not URL_PATTERN.fullmatch(reference):
            return None

        try:
            info = await asyncio.to_thread(self._extract_info_sync, reference)
        except (YoutubeDLError, ValidationError) as e:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, reference[:LOG_URL_TRUNCATE])
            return [
                TrackResolution.failed(
                    ErrorMessages.RESOLUTION_FAILED.format(reference=reference, error=e)
                )
            ]

        if info is None:
            return [
                TrackResolution.failed(
                    ErrorMessages.NO_STREAM_URL_FOR_TRACK.format(reference=reference)
                )
            ]
        return [self._info_to_track(reference, info, comment, requester)]

    async def fresh_stream_url(self, track: Track) -> str:
        """Stream URL to hand to FFmpeg; tracks from other providers pass through."""
        if track.webpage_url not in self._resolved_pages:
            return track.stream_url

        try:
            info = await asyncio.to_thread(self._extract_info_sync, track.webpage_url)
        except (YoutubeDLError, ValidationError):
            logger.warning(
                LogTemplates.YTDLP_FAILED_EXTRACT_INFO, track.webpage_url[:LOG_URL_TRUNCATE]
            )
            return track.stream_url

        if info is None or not info.stream_url:
            return track.stream_url
        if info.stream_url != track.stream_url:
            logger.debug(LogTemplates.YTDLP_STREAM_REFRESHED, track.webpage_url[:LOG_URL_TRUNCATE])
        return info.stream_url
