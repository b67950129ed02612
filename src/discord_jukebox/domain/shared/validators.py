"""Shared validators for domain models and settings.

Discord snowflake IDs are validated here so settings and models agree on the
accepted range.
"""

from __future__ import annotations

from collections.abc import Iterable

from discord_jukebox.domain.shared.messages import ErrorMessages


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Discord snowflake IDs are 64-bit unsigned integers representing unique
    identifiers for users, guilds, channels, messages, etc.

    Args:
        value: The snowflake ID to validate.

    Returns:
        The validated snowflake ID.

    Raises:
        ValueError: If the snowflake ID is invalid.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def validate_snowflake_collection(values: Iterable[int]) -> tuple[int, ...]:
    """Validate every snowflake of *values* and return them as a tuple."""
    return tuple(validate_discord_snowflake(v) for v in values)
