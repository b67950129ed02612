"""Port interface for turning user supplied references into tracks."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, model_validator

from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.types import DiscordSnowflake, NonEmptyStr


class Requester(BaseModel):
    """The user submitting a reference."""

    model_config = ConfigDict(frozen=True, strict=True)

    user_id: DiscordSnowflake
    name: NonEmptyStr


class TrackResolution(BaseModel):
    """Outcome for one item of an expanded reference: a track or a failure reason."""

    model_config = ConfigDict(frozen=True, strict=True)

    track: Track | None = None
    error: NonEmptyStr | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> TrackResolution:
        if (self.track is None) == (self.error is None):
            raise ValueError("TrackResolution needs either a track or an error")
        return self

    @classmethod
    def ok(cls, track: Track) -> TrackResolution:
        return cls(track=track)

    @classmethod
    def failed(cls, error: str) -> TrackResolution:
        return cls(error=error)


class TrackResolver(ABC):
    """Interface for one provider of tracks."""

    @abstractmethod
    async def resolve(
        self, reference: str, comment: str | None, requester: Requester
    ) -> list[TrackResolution] | None:
        """Expand *reference* into tracks.

        Returns ``None`` when the reference is not recognized by this resolver,
        otherwise one resolution per expanded item, in enqueue order.
        """
        ...
