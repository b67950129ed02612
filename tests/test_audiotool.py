"""
Unit Tests for the Audiotool Integration

Tests for:
- AudiotoolTrackDetails / AudiotoolListing parsing of loose JSON
- AudiotoolClient URLs, endpoints and the cular session keep-alive
- Track, single charts, genre charts and album resolvers

HTTP is served by ``httpx.MockTransport``; no network access is needed.
"""

import asyncio
from datetime import UTC, datetime

import httpx
import pytest
import pytest_asyncio
from conftest import ALICE

from discord_jukebox.config.settings import AudiotoolSettings
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.infrastructure.audio.audiotool_client import AudiotoolClient
from discord_jukebox.infrastructure.audio.audiotool_resolver import (
    AudiotoolAlbumResolver,
    AudiotoolGenreChartsResolver,
    AudiotoolSingleChartsResolver,
    AudiotoolTrackResolver,
)
from discord_jukebox.infrastructure.audio.models import AudiotoolListing, AudiotoolTrackDetails

WEBSITE = "www.audiotool.com"
API = "api.audiotool.com"

DETAILS = {
    "duration": 185_000,
    "name": "Night Drive",
    "coverUrl": "https://img.audiotool.com/cover.jpg",
    "bpm": 124,
    "genreName": "Synthwave",
    "user": {"key": "neon", "name": "Neon Rider"},
    "created": 1_609_459_200_000,
}


class FakeAudiotool:
    """Routes requests by host and path; records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], httpx.Response] = {
            (WEBSITE, "/"): httpx.Response(
                200,
                headers=[
                    ("set-cookie", "other=1; Path=/"),
                    ("set-cookie", "cular-session=s3ss10n; Path=/; HttpOnly"),
                ],
                text="<html></html>",
            ),
        }
        self.fail: set[tuple[str, str]] = set()

    def details(self, key: str, body) -> None:
        self.routes[(WEBSITE, f"/track/{key}/details.json")] = httpx.Response(200, json=body)

    def api(self, path: str, body, status: int = 200) -> None:
        self.routes[(API, path)] = httpx.Response(status, json=body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = (request.url.host, request.url.path)
        if route in self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        return self.routes.get(route, httpx.Response(404, json={}))


@pytest.fixture
def server():
    return FakeAudiotool()


@pytest_asyncio.fixture
async def client(server):
    client = AudiotoolClient(AudiotoolSettings(), transport=httpx.MockTransport(server))
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def session_client(client):
    """Client holding a session cookie."""
    await client.keep_alive()
    return client


# =============================================================================
# Models
# =============================================================================


class TestAudiotoolModels:
    def test_details_full(self):
        details = AudiotoolTrackDetails.model_validate(DETAILS)

        assert details.duration_seconds == 185
        assert details.name == "Night Drive"
        assert details.cover_url == "https://img.audiotool.com/cover.jpg"
        assert details.bpm == 124.0
        assert details.genre_name == "Synthwave"
        assert details.user.name == "Neon Rider"
        assert details.created == datetime(2021, 1, 1, tzinfo=UTC)

    def test_details_garbage_is_dropped(self):
        details = AudiotoolTrackDetails.model_validate(
            {
                "duration": "long",
                "name": "   ",
                "coverUrl": "/relative.png",
                "bpm": 0,
                "user": "nobody",
                "created": [2021],
            }
        )

        assert details.duration_seconds is None
        assert details.name is None
        assert details.cover_url is None
        assert details.bpm is None
        assert details.user.name is None
        assert details.created is None

    def test_details_iso_created(self):
        details = AudiotoolTrackDetails.model_validate({"created": "2021-01-01T00:00:00Z"})

        assert details.created == datetime(2021, 1, 1, tzinfo=UTC)

    def test_listing_skips_keyless_entries(self):
        listing = AudiotoolListing.model_validate(
            {"name": "", "tracks": [{"key": "a"}, {"name": "no key"}, "junk", {"key": "b"}]}
        )

        assert listing.name is None
        assert [t.key for t in listing.tracks] == ["a", "b"]

    def test_listing_without_tracks(self):
        assert AudiotoolListing.model_validate({"tracks": None}).tracks == []


# =============================================================================
# Client
# =============================================================================


class TestAudiotoolClient:
    @pytest.mark.asyncio
    async def test_page_url(self, client):
        assert client.page_url("abc") == "https://www.audiotool.com/track/abc/"

    @pytest.mark.asyncio
    async def test_playback_url_requires_cookie(self, client):
        assert client.cular_cookie is None
        assert client.playback_url("abc") is None

    @pytest.mark.asyncio
    async def test_keep_alive_stores_cookie(self, client, server):
        cookie = await client.keep_alive()

        assert cookie == "s3ss10n"
        assert client.playback_url("abc") == (
            "https://api.audiotool.com/track/abc/play.ogg"
            "?platform=1&ref=website&X-Cular-Session=s3ss10n"
        )
        assert server.requests[0].headers["User-Agent"] == "Discord Bot"

    @pytest.mark.asyncio
    async def test_keep_alive_failure_keeps_previous_cookie(self, client, server):
        await client.keep_alive()
        server.fail.add((WEBSITE, "/"))

        assert await client.keep_alive() == "s3ss10n"

    @pytest.mark.asyncio
    async def test_keep_alive_without_cookie(self, client, server):
        server.routes[(WEBSITE, "/")] = httpx.Response(200, text="")

        assert await client.keep_alive() is None

    @pytest.mark.asyncio
    async def test_background_keep_alive(self, client):
        client.start_keep_alive(interval=60.0)
        for _ in range(100):
            if client.cular_cookie is not None:
                break
            await asyncio.sleep(0.01)

        await client.stop_keep_alive()

        assert client.cular_cookie == "s3ss10n"

    @pytest.mark.asyncio
    async def test_stop_without_start(self, client):
        await client.stop_keep_alive()

    @pytest.mark.asyncio
    async def test_single_charts_query(self, client, server):
        server.api("/tracks/charts.json", {"name": "Charts", "tracks": [{"key": "a"}]})

        listing = await client.single_charts()

        assert listing.name == "Charts"
        request = server.requests[-1]
        assert request.url.params["offset"] == "0"
        assert request.url.params["limit"] == "10"

    @pytest.mark.asyncio
    async def test_album_uses_album_limit(self, client, server):
        server.api("/album/xyz/tracks.json", {"tracks": []})

        await client.album_tracks("xyz")

        assert server.requests[-1].url.params["limit"] == "100"

    @pytest.mark.asyncio
    async def test_http_error_is_raised(self, client):
        with pytest.raises(httpx.HTTPStatusError):
            await client.track_details("missing")


# =============================================================================
# Resolvers
# =============================================================================


class TestAudiotoolTrackResolver:
    @pytest.mark.asyncio
    async def test_ignores_other_references(self, session_client):
        resolver = AudiotoolTrackResolver(session_client)

        assert await resolver.resolve("https://youtu.be/x", None, ALICE) is None
        assert await resolver.resolve("at:single-charts", None, ALICE) is None

    @pytest.mark.asyncio
    async def test_resolves_track(self, session_client, server):
        server.details("night-drive", DETAILS)
        resolver = AudiotoolTrackResolver(session_client)

        results = await resolver.resolve(
            "https://www.audiotool.com/track/night-drive/", "banger", ALICE
        )

        assert len(results) == 1
        track = results[0].track
        assert track.title == "Night Drive"
        assert track.artist == "Neon Rider"
        assert track.genre == "Synthwave"
        assert track.bpm == 124.0
        assert track.duration_seconds == 185
        assert track.thumbnail_url == "https://img.audiotool.com/cover.jpg"
        assert track.comment == "banger"
        assert track.webpage_url == "https://www.audiotool.com/track/night-drive/"
        assert track.stream_url.endswith("X-Cular-Session=s3ss10n")
        assert track.requested_by_id == ALICE.user_id

    @pytest.mark.asyncio
    async def test_missing_details_still_playable(self, session_client):
        resolver = AudiotoolTrackResolver(session_client)

        results = await resolver.resolve("https://www.audiotool.com/track/ghost", None, ALICE)

        track = results[0].track
        assert track is not None
        assert track.title is None
        assert track.duration_seconds is None

    @pytest.mark.asyncio
    async def test_no_cookie_fails_item(self, client, server):
        server.details("night-drive", DETAILS)
        resolver = AudiotoolTrackResolver(client)

        results = await resolver.resolve("https://www.audiotool.com/track/night-drive", None, ALICE)

        assert results[0].track is None
        assert results[0].error == ErrorMessages.CULAR_COOKIE_INVALID


class TestAudiotoolListingResolvers:
    @pytest.mark.asyncio
    async def test_single_charts_lowest_rank_first(self, session_client, server):
        server.api(
            "/tracks/charts.json",
            {"name": "Single Charts", "tracks": [{"key": "first"}, {"key": "second"}]},
        )
        resolver = AudiotoolSingleChartsResolver(session_client)

        results = await resolver.resolve("at:single-charts", None, ALICE)

        assert [r.track.webpage_url for r in results] == [
            "https://www.audiotool.com/track/second/",
            "https://www.audiotool.com/track/first/",
        ]
        assert [r.track.comment for r in results] == [
            "#2 in Single Charts",
            "#1 in Single Charts",
        ]

    @pytest.mark.asyncio
    async def test_user_comment_overrides_rank(self, session_client, server):
        server.api("/tracks/charts.json", {"tracks": [{"key": "first"}]})
        resolver = AudiotoolSingleChartsResolver(session_client)

        results = await resolver.resolve("at:single-charts", "for the party", ALICE)

        assert results[0].track.comment == "for the party"

    @pytest.mark.asyncio
    async def test_single_charts_exact_match(self, session_client):
        resolver = AudiotoolSingleChartsResolver(session_client)

        assert await resolver.resolve("at:single-charts-2", None, ALICE) is None

    @pytest.mark.asyncio
    async def test_chart_failure_is_single_notice(self, session_client, server):
        server.api("/tracks/charts.json", {}, status=500)
        resolver = AudiotoolSingleChartsResolver(session_client)

        results = await resolver.resolve("at:single-charts", None, ALICE)

        assert len(results) == 1
        assert results[0].error.startswith("Could not load `Single Charts`")

    @pytest.mark.asyncio
    async def test_genre_charts(self, session_client, server):
        server.api("/genre/house/charts/2024-05.json", {"tracks": [{"key": "a"}, {"key": "b"}]})
        resolver = AudiotoolGenreChartsResolver(session_client)

        results = await resolver.resolve(
            "https://www.audiotool.com/genre/house/charts/2024-05", None, ALICE
        )

        assert [r.track.comment for r in results] == [
            "#2 in house charts 2024-05",
            "#1 in house charts 2024-05",
        ]

    @pytest.mark.asyncio
    async def test_genre_charts_requires_week(self, session_client):
        resolver = AudiotoolGenreChartsResolver(session_client)

        assert await resolver.resolve("https://www.audiotool.com/genre/house/charts/", None, ALICE) is None

    @pytest.mark.asyncio
    async def test_album_in_order(self, session_client, server):
        server.api(
            "/album/summer/tracks.json",
            {"name": "Summer", "tracks": [{"key": "one"}, {"key": "two"}, {"key": "three"}]},
        )
        resolver = AudiotoolAlbumResolver(session_client)

        results = await resolver.resolve("https://www.audiotool.com/album/summer/", None, ALICE)

        assert [r.track.comment for r in results] == [
            "#1 in Summer",
            "#2 in Summer",
            "#3 in Summer",
        ]

    @pytest.mark.asyncio
    async def test_album_connection_error(self, session_client, server):
        server.fail.add((API, "/album/summer/tracks.json"))
        resolver = AudiotoolAlbumResolver(session_client)

        results = await resolver.resolve("https://www.audiotool.com/album/summer", None, ALICE)

        assert results[0].error.startswith("Could not load `album: summer`")
