"""
Unit Tests for YtDlpResolver

Tests for the yt-dlp fallback resolver:
- Claiming http(s) URLs only
- Info dict to Track conversion, including the formats fallback
- Extraction failures turned into per-item errors
- Caching behavior
- Stream URL refresh before playback

Uses pytest with async/await patterns and patches YoutubeDL.
"""

import time
from unittest.mock import patch

import pytest
from conftest import ALICE, make_track
from yt_dlp.utils import DownloadError

from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.infrastructure.audio.models import (
    CACHE_TTL,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from discord_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

RESOLVER_MODULE = "discord_jukebox.infrastructure.audio.ytdlp_resolver"
YOUTUBE_DL = f"{RESOLVER_MODULE}.YoutubeDL"
PAGE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@pytest.fixture
def resolver():
    """Create a YtDlpResolver instance."""
    return YtDlpResolver(AudioSettings())


@pytest.fixture
def info_dict():
    return {
        "webpage_url": PAGE_URL,
        "url": "https://rr1.googlevideo.com/stream-1",
        "title": "Test Song",
        "duration": 212.4,
        "thumbnail": "https://i.ytimg.com/vi/thumb.jpg",
        "uploader": "Test Channel",
        "genre": "Pop",
        "view_count": 50000,
    }


# =============================================================================
# Models
# =============================================================================


class TestYtDlpModels:
    def test_performer_prefers_artist(self):
        info = YtDlpTrackInfo(artist="Artist", uploader="Uploader")

        assert info.performer == "Artist"

    def test_performer_falls_back_to_channel(self):
        assert YtDlpTrackInfo(channel="Channel").performer == "Channel"

    def test_stream_url_from_last_audio_format(self):
        info = YtDlpTrackInfo.model_validate(
            {
                "formats": [
                    {"url": "https://cdn/a", "acodec": "opus"},
                    {"url": "https://cdn/b", "acodec": "mp4a"},
                    {"url": "https://cdn/video", "acodec": "none"},
                ]
            }
        )

        assert info.stream_url == "https://cdn/b"

    def test_garbage_values_are_dropped(self):
        info = YtDlpTrackInfo.model_validate(
            {"title": "  ", "duration": "n/a", "thumbnail": "data:image/png", "webpage_url": 3}
        )

        assert info.title is None
        assert info.duration is None
        assert info.thumbnail is None
        assert info.webpage_url is None
        assert info.stream_url is None

    def test_opts_use_configured_format(self):
        opts = YtDlpOpts(format="bestaudio")

        dumped = opts.model_dump()
        assert dumped["format"] == "bestaudio"
        assert dumped["noplaylist"] is True
        assert dumped["skip_download"] is True


# =============================================================================
# Resolve
# =============================================================================


class TestResolve:
    @pytest.mark.parametrize(
        "reference",
        ["at:single-charts", "some words", "ftp://example.com/a.mp3", "https://x.com/a b"],
    )
    @pytest.mark.asyncio
    async def test_ignores_non_urls(self, resolver, reference):
        assert await resolver.resolve(reference, None, ALICE) is None

    @pytest.mark.asyncio
    async def test_resolves_url(self, resolver, info_dict):
        with patch(YOUTUBE_DL) as mock_ydl:
            mock_ydl.return_value.__enter__.return_value.extract_info.return_value = info_dict
            results = await resolver.resolve("https://youtu.be/dQw4w9WgXcQ", "classic", ALICE)

        assert len(results) == 1
        track = results[0].track
        assert track.stream_url == "https://rr1.googlevideo.com/stream-1"
        assert track.webpage_url == PAGE_URL
        assert track.title == "Test Song"
        assert track.artist == "Test Channel"
        assert track.genre == "Pop"
        assert track.duration_seconds == 212
        assert track.thumbnail_url == "https://i.ytimg.com/vi/thumb.jpg"
        assert track.comment == "classic"
        assert track.requested_by_name == ALICE.name

    @pytest.mark.asyncio
    async def test_missing_page_url_uses_reference(self, resolver):
        with patch(YOUTUBE_DL) as mock_ydl:
            mock_ydl.return_value.__enter__.return_value.extract_info.return_value = {
                "url": "https://cdn.example.com/file.mp3"
            }
            results = await resolver.resolve("https://example.com/file.mp3", None, ALICE)

        assert results[0].track.webpage_url == "https://example.com/file.mp3"
        assert results[0].track.title is None

    @pytest.mark.asyncio
    async def test_passes_options(self, resolver, info_dict):
        with patch(YOUTUBE_DL) as mock_ydl:
            mock_ydl.return_value.__enter__.return_value.extract_info.return_value = info_dict
            await resolver.resolve(PAGE_URL, None, ALICE)

        params = mock_ydl.call_args.kwargs["params"]
        assert params["format"] == "bestaudio/best"
        assert params["quiet"] is True
        mock_ydl.return_value.__enter__.return_value.extract_info.assert_called_once_with(
            PAGE_URL, download=False
        )

    @pytest.mark.asyncio
    async def test_no_stream_url(self, resolver):
        with patch(YOUTUBE_DL) as mock_ydl:
            mock_ydl.return_value.__enter__.return_value.extract_info.return_value = {
                "title": "Video only",
                "formats": [{"url": "https://cdn/v", "acodec": "none"}],
            }
            results = await resolver.resolve(PAGE_URL, None, ALICE)

        assert results[0].error == ErrorMessages.NO_STREAM_URL_FOR_TRACK.format(reference=PAGE_URL)

    @pytest.mark.asyncio
    async def test_extractor_returns_nothing(self, resolver):
        with patch(YOUTUBE_DL) as mock_ydl:
            mock_ydl.return_value.__enter__.return_value.extract_info.return_value = None
            results = await resolver.resolve(PAGE_URL, None, ALICE)

        assert results[0].error == ErrorMessages.NO_STREAM_URL_FOR_TRACK.format(reference=PAGE_URL)

    @pytest.mark.asyncio
    async def test_download_error_is_item_failure(self, resolver):
        with patch(YOUTUBE_DL) as mock_ydl:
            mock_ydl.return_value.__enter__.return_value.extract_info.side_effect = DownloadError(
                "Video unavailable"
            )
            results = await resolver.resolve(PAGE_URL, None, ALICE)

        assert results[0].track is None
        assert results[0].error.startswith(f"Failed to resolve `{PAGE_URL}`")
        assert "Video unavailable" in results[0].error


# =============================================================================
# Caching
# =============================================================================


class TestCaching:
    def test_extract_info_is_cached(self, resolver, info_dict):
        with patch(YOUTUBE_DL) as mock_ydl:
            mock_ydl.return_value.__enter__.return_value.extract_info.return_value = info_dict
            first = resolver._extract_info_sync(PAGE_URL)
            second = resolver._extract_info_sync(PAGE_URL)

        assert first == second
        assert mock_ydl.call_count == 1

    def test_expired_entry_is_refetched(self, resolver, info_dict):
        resolver._cache[PAGE_URL] = CacheEntry(
            info=YtDlpTrackInfo(url="https://old"), cached_at=time.time() - CACHE_TTL - 1
        )

        with patch(YOUTUBE_DL) as mock_ydl:
            mock_ydl.return_value.__enter__.return_value.extract_info.return_value = info_dict
            info = resolver._extract_info_sync(PAGE_URL)

        assert info.url == "https://rr1.googlevideo.com/stream-1"
        assert mock_ydl.call_count == 1

    def test_failures_are_not_cached(self, resolver, info_dict):
        with patch(YOUTUBE_DL) as mock_ydl:
            extract = mock_ydl.return_value.__enter__.return_value.extract_info
            extract.side_effect = DownloadError("temporary")
            with pytest.raises(DownloadError):
                resolver._extract_info_sync(PAGE_URL)

            extract.side_effect = None
            extract.return_value = info_dict
            assert resolver._extract_info_sync(PAGE_URL) is not None

    def test_resolved_pages_are_bounded(self, resolver):
        """Should forget the least recently resolved pages past the limit."""
        with patch(f"{RESOLVER_MODULE}.RESOLVED_PAGES_MAX_SIZE", 2):
            resolver._remember_page("https://a.example.com")
            resolver._remember_page("https://b.example.com")
            resolver._remember_page("https://a.example.com")
            resolver._remember_page("https://c.example.com")

        assert list(resolver._resolved_pages) == [
            "https://a.example.com",
            "https://c.example.com",
        ]


# =============================================================================
# Stream refresh
# =============================================================================


class TestFreshStreamUrl:
    @pytest.mark.asyncio
    async def test_foreign_tracks_pass_through(self, resolver):
        track = make_track("Audiotool Song")

        with patch(YOUTUBE_DL) as mock_ydl:
            url = await resolver.fresh_stream_url(track)

        assert url == track.stream_url
        mock_ydl.assert_not_called()

    @pytest.mark.asyncio
    async def test_refreshes_expired_stream(self, resolver, info_dict):
        with patch(YOUTUBE_DL) as mock_ydl:
            extract = mock_ydl.return_value.__enter__.return_value.extract_info
            extract.return_value = info_dict
            results = await resolver.resolve(PAGE_URL, None, ALICE)
            track = results[0].track

            resolver._cache.clear()
            extract.return_value = {**info_dict, "url": "https://rr1.googlevideo.com/stream-2"}
            url = await resolver.fresh_stream_url(track)

        assert url == "https://rr1.googlevideo.com/stream-2"

    @pytest.mark.asyncio
    async def test_cached_stream_is_reused(self, resolver, info_dict):
        with patch(YOUTUBE_DL) as mock_ydl:
            mock_ydl.return_value.__enter__.return_value.extract_info.return_value = info_dict
            results = await resolver.resolve(PAGE_URL, None, ALICE)
            url = await resolver.fresh_stream_url(results[0].track)

        assert url == results[0].track.stream_url
        assert mock_ydl.call_count == 1

    @pytest.mark.asyncio
    async def test_refresh_failure_keeps_old_url(self, resolver, info_dict):
        with patch(YOUTUBE_DL) as mock_ydl:
            extract = mock_ydl.return_value.__enter__.return_value.extract_info
            extract.return_value = info_dict
            results = await resolver.resolve(PAGE_URL, None, ALICE)
            track = results[0].track

            resolver._cache.clear()
            extract.side_effect = DownloadError("gone")
            url = await resolver.fresh_stream_url(track)

        assert url == track.stream_url
