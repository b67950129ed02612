"""TrackResolver implementations for audiotool.com tracks, charts and albums."""

from __future__ import annotations

import logging
import re
from abc import abstractmethod
from typing import Final

import httpx
from pydantic import ValidationError

from discord_jukebox.application.interfaces.track_resolver import (
    Requester,
    TrackResolution,
    TrackResolver,
)
from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.audiotool_client import AudiotoolClient
from discord_jukebox.infrastructure.audio.models import AudiotoolListing, AudiotoolTrackDetails

logger = logging.getLogger(__name__)

SINGLE_CHARTS_REFERENCE: Final[str] = "at:single-charts"
SINGLE_CHARTS_NAME: Final[str] = "Single Charts"

TRACK_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"https?://www\.audiotool\.com/track/([^/\s]+)"
)
GENRE_CHARTS_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"https?://www\.audiotool\.com/genre/([^/\s]+)/charts/(\d{4}-\d{2})"
)
ALBUM_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"https?://www\.audiotool\.com/album/([^/\s]+)"
)


async def build_track(
    client: AudiotoolClient, key: str, comment: str | None, requester: Requester
) -> TrackResolution:
    """Load details for *key* and turn them into a playable track.

    Missing details only leave the metadata empty; a missing session cookie
    fails the item because nothing could be streamed.
    """
    try:
        details = await client.track_details(key)
    except (httpx.HTTPError, ValidationError) as e:
        logger.warning(LogTemplates.AUDIOTOOL_REQUEST_FAILED, key, e)
        details = AudiotoolTrackDetails()

    playback_url = client.playback_url(key)
    if playback_url is None:
        return TrackResolution.failed(ErrorMessages.CULAR_COOKIE_INVALID)

    try:
        track = Track(
            stream_url=playback_url,
            webpage_url=client.page_url(key),
            title=details.name,
            artist=details.user.name,
            genre=details.genre_name,
            bpm=details.bpm,
            created_at=details.created,
            thumbnail_url=details.cover_url,
            duration_seconds=details.duration_seconds,
            comment=comment or None,
            requested_by_id=requester.user_id,
            requested_by_name=requester.name,
        )
    except ValidationError as e:
        logger.warning(LogTemplates.RESOLVER_ITEM_FAILED, key, e)
        return TrackResolution.failed(ErrorMessages.RESOLUTION_FAILED.format(reference=key, error=e))
    return TrackResolution.ok(track)


class AudiotoolTrackResolver(TrackResolver):
    """``https://www.audiotool.com/track/<key>``"""

    def __init__(self, client: AudiotoolClient) -> None:
        self._client = client

    async def resolve(
        self, reference: str, comment: str | None, requester: Requester
    ) -> list[TrackResolution] | None:
        match = TRACK_URL_PATTERN.match(reference)
        if match is None:
            return None
        return [await build_track(self._client, match.group(1), comment, requester)]


class AudiotoolListingResolver(TrackResolver):
    """Base for references that expand into a numbered list of tracks.

    Subclasses recognize the reference and fetch the listing.  Each entry
    gets the comment ``#<n> in <listing name>`` unless the user supplied one.
    """

    reverse: bool = False

    def __init__(self, client: AudiotoolClient) -> None:
        self._client = client

    @abstractmethod
    def match(self, reference: str) -> tuple[str, ...] | None:
        """Return the captured parameters, or None if *reference* is not ours."""
        ...

    @abstractmethod
    async def fetch(self, *params: str) -> AudiotoolListing:
        ...

    @abstractmethod
    def fallback_name(self, *params: str) -> str:
        ...

    async def resolve(
        self, reference: str, comment: str | None, requester: Requester
    ) -> list[TrackResolution] | None:
        params = self.match(reference)
        if params is None:
            return None

        fallback = self.fallback_name(*params)
        try:
            listing = await self.fetch(*params)
        except (httpx.HTTPError, ValidationError) as e:
            logger.warning(LogTemplates.AUDIOTOOL_REQUEST_FAILED, reference, e)
            return [
                TrackResolution.failed(ErrorMessages.CHART_UNAVAILABLE.format(name=fallback, error=e))
            ]

        name = listing.name or fallback
        results = []
        for rank, ref in enumerate(listing.tracks, start=1):
            item_comment = comment or f"#{rank} in {name}"
            results.append(await build_track(self._client, ref.key, item_comment, requester))

        if self.reverse:
            results.reverse()
        return results


class AudiotoolSingleChartsResolver(AudiotoolListingResolver):
    """``at:single-charts``; enqueued lowest rank first."""

    reverse = True

    def match(self, reference: str) -> tuple[str, ...] | None:
        return () if reference == SINGLE_CHARTS_REFERENCE else None

    async def fetch(self, *params: str) -> AudiotoolListing:
        return await self._client.single_charts()

    def fallback_name(self, *params: str) -> str:
        return SINGLE_CHARTS_NAME


class AudiotoolGenreChartsResolver(AudiotoolListingResolver):
    """``https://www.audiotool.com/genre/<genre>/charts/<yyyy-ww>``; lowest rank first."""

    reverse = True

    def match(self, reference: str) -> tuple[str, ...] | None:
        m = GENRE_CHARTS_URL_PATTERN.match(reference)
        return (m.group(1), m.group(2)) if m else None

    async def fetch(self, *params: str) -> AudiotoolListing:
        genre, date = params
        return await self._client.genre_charts(genre, date)

    def fallback_name(self, *params: str) -> str:
        genre, date = params
        return f"{genre} charts {date}"


class AudiotoolAlbumResolver(AudiotoolListingResolver):
    """``https://www.audiotool.com/album/<key>``; enqueued in album order."""

    def match(self, reference: str) -> tuple[str, ...] | None:
        m = ALBUM_URL_PATTERN.match(reference)
        return (m.group(1),) if m else None

    async def fetch(self, *params: str) -> AudiotoolListing:
        (key,) = params
        return await self._client.album_tracks(key)

    def fallback_name(self, *params: str) -> str:
        (key,) = params
        return f"album: {key}"
