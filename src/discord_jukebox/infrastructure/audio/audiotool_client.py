"""HTTP client for the Audiotool web API.

Playback URLs require a ``cular-session`` cookie.  The website hands one out
on every page view, so a background task keeps requesting the front page and
stores the most recent value.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Final

import httpx

from discord_jukebox.config.settings import AudiotoolSettings
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.infrastructure.audio.models import AudiotoolListing, AudiotoolTrackDetails

logger = logging.getLogger(__name__)

CULAR_COOKIE_PREFIX: Final[str] = "cular-session="
PLAYBACK_QUERY: Final[str] = "platform=1&ref=website"


class AudiotoolClient:
    """Thin async wrapper around the JSON endpoints used by the resolvers.

    Fetch methods raise :class:`httpx.HTTPError` for transport and status
    failures and :class:`pydantic.ValidationError` for malformed bodies.
    """

    def __init__(
        self,
        settings: AudiotoolSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AudiotoolSettings()
        self._http = httpx.AsyncClient(
            headers={"User-Agent": self._settings.user_agent},
            timeout=self._settings.request_timeout_s,
            transport=transport,
            follow_redirects=True,
        )
        self._cular_cookie: str | None = None
        self._keep_alive_task: asyncio.Task[None] | None = None

    @property
    def cular_cookie(self) -> str | None:
        return self._cular_cookie

    @property
    def settings(self) -> AudiotoolSettings:
        return self._settings

    # === URLs ===

    def page_url(self, key: str) -> str:
        return f"{self._settings.website_url}/track/{key}/"

    def playback_url(self, key: str) -> str | None:
        """Streamable OGG URL for *key*, or None while no session cookie is known."""
        if self._cular_cookie is None:
            return None
        return (
            f"{self._settings.api_url}/track/{key}/play.ogg"
            f"?{PLAYBACK_QUERY}&X-Cular-Session={self._cular_cookie}"
        )

    # === Endpoints ===

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        logger.debug(LogTemplates.AUDIOTOOL_REQUEST, url)
        response = await self._http.get(url, params=params)
        response.raise_for_status()
        return response.json()

    async def track_details(self, key: str) -> AudiotoolTrackDetails:
        data = await self._get_json(f"{self._settings.website_url}/track/{key}/details.json")
        return AudiotoolTrackDetails.model_validate(data)

    async def single_charts(self) -> AudiotoolListing:
        data = await self._get_json(
            f"{self._settings.api_url}/tracks/charts.json",
            params={"offset": 0, "limit": self._settings.chart_limit},
        )
        return AudiotoolListing.model_validate(data)

    async def genre_charts(self, genre: str, date: str) -> AudiotoolListing:
        data = await self._get_json(
            f"{self._settings.api_url}/genre/{genre}/charts/{date}.json",
            params={"offset": 0, "limit": self._settings.chart_limit},
        )
        return AudiotoolListing.model_validate(data)

    async def album_tracks(self, key: str) -> AudiotoolListing:
        data = await self._get_json(
            f"{self._settings.api_url}/album/{key}/tracks.json",
            params={"offset": 0, "limit": self._settings.album_limit},
        )
        return AudiotoolListing.model_validate(data)

    # === Session cookie ===

    @staticmethod
    def _extract_cular_cookie(set_cookie_headers: list[str]) -> str | None:
        for header in set_cookie_headers:
            if header.startswith(CULAR_COOKIE_PREFIX):
                value = header[len(CULAR_COOKIE_PREFIX):].split(";", 1)[0].strip()
                if value:
                    return value
        return None

    async def keep_alive(self) -> str | None:
        """Request the front page once and remember the session cookie it sets.

        Failures are logged; the previous cookie stays in place.
        """
        url = f"{self._settings.website_url}/"
        try:
            response = await self._http.get(url)
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.AUDIOTOOL_KEEP_ALIVE_FAILED, e)
            return self._cular_cookie

        cookie = self._extract_cular_cookie(response.headers.get_list("set-cookie"))
        if cookie is None:
            logger.warning(LogTemplates.AUDIOTOOL_COOKIE_MISSING)
        else:
            self._cular_cookie = cookie
            logger.debug(LogTemplates.AUDIOTOOL_COOKIE_REFRESHED)
        return self._cular_cookie

    async def _keep_alive_loop(self, interval: float) -> None:
        while True:
            await self.keep_alive()
            await asyncio.sleep(interval)

    def start_keep_alive(self, interval: float | None = None) -> None:
        if self._keep_alive_task is not None and not self._keep_alive_task.done():
            return
        interval = interval or self._settings.keep_alive_interval_s
        self._keep_alive_task = asyncio.create_task(
            self._keep_alive_loop(interval), name="audiotool-keep-alive"
        )
        logger.info(LogTemplates.AUDIOTOOL_KEEP_ALIVE_STARTED, interval)

    async def stop_keep_alive(self) -> None:
        task, self._keep_alive_task = self._keep_alive_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info(LogTemplates.AUDIOTOOL_KEEP_ALIVE_STOPPED)

    async def aclose(self) -> None:
        await self.stop_keep_alive()
        await self._http.aclose()
