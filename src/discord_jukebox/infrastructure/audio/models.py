"""Pydantic models for external track metadata and yt-dlp configuration.

These are infrastructure-specific models for parsing Audiotool JSON
responses and yt-dlp extraction results, and for configuring yt-dlp.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Final

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from discord_jukebox.domain.shared.types import (
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveInt,
    TempoBpm,
)

CACHE_TTL: Final[int] = 3600
CACHE_MAX_SIZE: Final[int] = 500
RESOLVED_PAGES_MAX_SIZE: Final[int] = 2000
DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
DEFAULT_HTTP_CHUNK_SIZE: Final[int] = 1024 * 1024  # 1 MiB
MAX_DURATION_SECONDS: Final[int] = 86_400


def _blank_to_none(v: Any) -> str | None:
    if not isinstance(v, str) or not v.strip():
        return None
    return v


def _http_or_none(v: Any) -> str | None:
    v = _blank_to_none(v)
    if v is None or not v.startswith(("http://", "https://")):
        return None
    return v


def _duration_or_none(v: Any, *, scale: float = 1.0) -> int | None:
    if v is None or isinstance(v, bool):
        return None
    try:
        seconds = round(float(v) / scale)
    except (TypeError, ValueError):
        return None
    return seconds if 0 <= seconds <= MAX_DURATION_SECONDS else None


# ── Audiotool JSON ─────────────────────────────────────────────────────


class AudiotoolUser(BaseModel):
    """Author block of a track details response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: NonEmptyStr | None = None
    name: NonEmptyStr | None = None

    @field_validator("key", "name", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        return _blank_to_none(v)


class AudiotoolTrackDetails(BaseModel):
    """``/track/<key>/details.json``; every field is optional.

    ``duration`` is reported in milliseconds and converted to whole seconds.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    duration_seconds: NonNegativeInt | None = Field(
        default=None, validation_alias=AliasChoices("duration", "duration_seconds")
    )
    name: NonEmptyStr | None = None
    cover_url: HttpUrlStr | None = Field(
        default=None, validation_alias=AliasChoices("coverUrl", "cover_url")
    )
    bpm: TempoBpm | None = None
    genre_name: NonEmptyStr | None = Field(
        default=None, validation_alias=AliasChoices("genreName", "genre_name")
    )
    user: AudiotoolUser = Field(default_factory=AudiotoolUser)
    created: datetime | None = None

    @field_validator("duration_seconds", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        return _duration_or_none(v, scale=1000.0)

    @field_validator("name", "genre_name", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        return _blank_to_none(v)

    @field_validator("cover_url", mode="before")
    @classmethod
    def _coerce_cover(cls, v: Any) -> str | None:
        return _http_or_none(v)

    @field_validator("bpm", mode="before")
    @classmethod
    def _coerce_bpm(cls, v: Any) -> float | None:
        if v is None or isinstance(v, bool):
            return None
        try:
            bpm = float(v)
        except (TypeError, ValueError):
            return None
        return bpm if bpm > 0 else None

    @field_validator("user", mode="before")
    @classmethod
    def _coerce_user(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    @field_validator("created", mode="before")
    @classmethod
    def _coerce_created(cls, v: Any) -> datetime | None:
        """Accept epoch milliseconds or ISO-8601 strings; anything else is dropped."""
        if isinstance(v, bool) or v is None:
            return None
        if isinstance(v, int | float):
            try:
                return datetime.fromtimestamp(v / 1000.0, tz=UTC)
            except (OverflowError, OSError, ValueError):
                return None
        if isinstance(v, str):
            try:
                return datetime.fromisoformat(v.replace("Z", "+00:00"))
            except ValueError:
                return None
        return None


class AudiotoolTrackRef(BaseModel):
    """A track entry of a chart or album listing."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: NonEmptyStr


class AudiotoolListing(BaseModel):
    """Chart or album listing; entries without a key are skipped."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: NonEmptyStr | None = None
    tracks: list[AudiotoolTrackRef] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        return _blank_to_none(v)

    @field_validator("tracks", mode="before")
    @classmethod
    def _drop_keyless(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [t for t in v if isinstance(t, dict) and _blank_to_none(t.get("key"))]


# ── yt-dlp data ────────────────────────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single audio format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result for caching and track conversion.

    Extra fields from yt-dlp are silently ignored, keeping memory usage low.
    Before-validators coerce garbage from external yt-dlp data gracefully.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    webpage_url: HttpUrlStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr | None = None
    duration: NonNegativeInt | None = None
    thumbnail: HttpUrlStr | None = None
    artist: NonEmptyStr | None = None
    creator: NonEmptyStr | None = None
    uploader: NonEmptyStr | None = None
    channel: NonEmptyStr | None = None
    genre: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator(
        "url", "title", "artist", "creator", "uploader", "channel", "genre",
        mode="before",
    )
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        return _blank_to_none(v)

    @field_validator("webpage_url", "thumbnail", mode="before")
    @classmethod
    def _coerce_url(cls, v: Any) -> str | None:
        return _http_or_none(v)

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """Coerce to non-negative int; return None for garbage values."""
        return _duration_or_none(v)

    @property
    def performer(self) -> str | None:
        return self.artist or self.creator or self.uploader or self.channel

    @property
    def stream_url(self) -> str | None:
        if self.url:
            return self.url
        audio_formats = [f for f in self.formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None


class CacheEntry(BaseModel):
    """Cached yt-dlp extraction result with expiry timestamp."""

    model_config = ConfigDict(frozen=True)

    info: YtDlpTrackInfo | None = None
    cached_at: NonNegativeFloat


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    forceipv4: bool = True
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    http_chunk_size: PositiveInt = DEFAULT_HTTP_CHUNK_SIZE
    format: NonEmptyStr | None = None
    skip_download: bool = True
