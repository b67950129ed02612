"""Core domain entities for the music bounded context."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from discord_jukebox.domain.shared.types import (
    DiscordSnowflake,
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    TempoBpm,
)

UNKNOWN_ARTIST = "(unknown artist)"
UNKNOWN_TITLE = "(unknown title)"


class Track(BaseModel):
    """Immutable value object representing a playable track."""

    model_config = ConfigDict(frozen=True, strict=True)

    stream_url: NonEmptyStr
    webpage_url: HttpUrlStr

    title: NonEmptyStr | None = None
    artist: NonEmptyStr | None = None
    genre: NonEmptyStr | None = None
    bpm: TempoBpm | None = None
    created_at: datetime | None = None
    thumbnail_url: HttpUrlStr | None = None
    duration_seconds: DurationSeconds | None = None
    comment: NonEmptyStr | None = None

    # Request metadata (set when queued)
    requested_by_id: DiscordSnowflake
    requested_by_name: NonEmptyStr

    @property
    def duration_formatted(self) -> str | None:
        """Format duration as M:SS, minutes are not wrapped into hours."""
        if self.duration_seconds is None:
            return None
        minutes, seconds = divmod(self.duration_seconds, 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def caption(self) -> str:
        """One-line markdown description used in listings and announcements."""
        parts = [f"**{self.artist or UNKNOWN_ARTIST}** - **{self.title or UNKNOWN_TITLE}**"]

        if self.duration_formatted is not None:
            parts.append(f" ({self.duration_formatted})")

        bpm = round(self.bpm) if self.bpm is not None else None
        if self.genre and bpm is not None:
            parts.append(f" [{self.genre}@{bpm} bpm]")
        elif self.genre:
            parts.append(f" [{self.genre}]")
        elif bpm is not None:
            parts.append(f" [@{bpm} bpm]")

        if self.comment:
            parts.append(f' "{self.comment}"')

        parts.append(f" `@{self.requested_by_name}`")
        return "".join(parts)

    def with_comment(self, comment: str | None) -> Track:
        """Return a copy carrying *comment*, or self when there is nothing to set."""
        if not comment:
            return self
        return self.model_copy(update={"comment": comment})


class QueueEntry(BaseModel):
    """A slot in a playback queue holding exactly one track.

    Entries are compared by identity: the same track enqueued twice yields two
    distinct entries.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    track: Track

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    @property
    def caption(self) -> str:
        return self.track.caption

    @property
    def requested_by_id(self) -> int:
        return self.track.requested_by_id

    @property
    def duration_seconds(self) -> int | None:
        return self.track.duration_seconds
