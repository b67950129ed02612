"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import ListingLimit, RequestTimeoutS, VolumeFloat
from ..domain.shared.validators import validate_snowflake_collection


class DiscordSettings(BaseModel):
    """Discord bot configuration.

    ``command_channel_ids`` restricts where commands are accepted (everywhere
    when empty).  ``announce_channel_ids`` maps a guild id to the text channel
    that receives greetings and "Now playing" announcements.
    """

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="/al ",
        min_length=1,
        max_length=10,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    command_channel_ids: tuple[int, ...] = Field(
        default_factory=tuple,
        validation_alias=AliasChoices("command_channel_ids", "command_channels"),
    )
    announce_channel_ids: dict[int, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("announce_channel_ids", "announce_channels"),
    )

    @field_validator("command_channel_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        return validate_snowflake_collection(v)

    @field_validator("announce_channel_ids", mode="before")
    @classmethod
    def validate_announce_channels(cls, v: dict[Any, Any]) -> dict[int, int]:
        """Accept JSON objects (string keys) and validate both sides as snowflakes."""
        if not isinstance(v, dict):
            raise ValueError("announce_channel_ids must be a mapping of guild id to channel id")
        guild_ids = validate_snowflake_collection([int(k) for k in v])
        channel_ids = validate_snowflake_collection([int(c) for c in v.values()])
        return dict(zip(guild_ids, channel_ids, strict=True))


class AudioSettings(BaseModel):
    """Audio playback configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    default_volume: VolumeFloat = 0.5
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )
    ytdlp_format: str = "bestaudio/best"


class AudiotoolSettings(BaseModel):
    """Audiotool web API configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    website_url: str = "https://www.audiotool.com"
    api_url: str = "https://api.audiotool.com"
    user_agent: str = Field(default="Discord Bot", min_length=1)
    request_timeout_s: RequestTimeoutS = Field(
        default=10.0,
        validation_alias=AliasChoices("request_timeout_s", "request_timeout"),
    )
    keep_alive_interval_s: float = Field(
        default=60.0,
        ge=1.0,
        validation_alias=AliasChoices("keep_alive_interval_s", "keep_alive_interval"),
    )
    chart_limit: ListingLimit = 10
    album_limit: ListingLimit = 100

    @field_validator("website_url", "api_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Audiotool URLs must start with http:// or https://")
        return v.rstrip("/")


class QueueSettings(BaseModel):
    """Queue defaults applied to every newly seen guild."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    default_quota: int | None = Field(
        default=None, ge=0, validation_alias=AliasChoices("default_quota", "quota")
    )
    print_before: int = Field(default=2, ge=0, le=50)
    print_after: int = Field(default=15, ge=0, le=100)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__COMMAND_PREFIX, DISCORD__COMMAND_CHANNEL_IDS, ...
    - AUDIO__DEFAULT_VOLUME, AUDIO__YTDLP_FORMAT, ...
    - AUDIOTOOL__KEEP_ALIVE_INTERVAL_S, AUDIOTOOL__USER_AGENT, ...
    - QUEUE__DEFAULT_QUOTA, QUEUE__PRINT_BEFORE, QUEUE__PRINT_AFTER
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    audiotool: AudiotoolSettings = Field(default_factory=AudiotoolSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
