"""Utility functions for formatting Discord messages."""

from __future__ import annotations

MESSAGE_CHUNK_LIMIT = 1950
POSITION_BAR_WIDTH = 40


def parse_timestamp(value: str) -> int | None:
    """Parse a timestamp string into total seconds.

    Accepts formats like "90", "1:30", or "1:30:00".
    Returns None if the input is invalid.
    """
    value = value.strip()
    if not value:
        return None

    parts = value.split(":")
    if len(parts) > 3:
        return None

    try:
        int_parts = [int(p) for p in parts]
    except ValueError:
        return None

    if any(p < 0 for p in int_parts):
        return None

    if len(int_parts) == 1:
        return int_parts[0]
    if len(int_parts) == 2:
        return int_parts[0] * 60 + int_parts[1]
    return int_parts[0] * 3600 + int_parts[1] * 60 + int_parts[2]


def chunk_message(text: str, limit: int = MESSAGE_CHUNK_LIMIT) -> list[str]:
    """Split *text* on line boundaries into chunks that stay below *limit*.

    A single line longer than the limit is sent as its own chunk; Discord
    rejects it in that case, which the caller logs.
    """
    chunks: list[str] = []
    current = ""
    for line in text.splitlines():
        if current and len(current) + 1 + len(line) >= limit:
            chunks.append(current)
            current = ""
        current = f"{current}\n{line}" if current else line
    if current:
        chunks.append(current)
    return chunks


def position_bar(position: float, duration: int, width: int = POSITION_BAR_WIDTH) -> str:
    """Render a framed progress bar with elapsed and remaining time."""
    elapsed = min(int(position), duration)
    remaining = duration - elapsed
    shift = round(width * elapsed / duration) if duration > 0 else 0

    elapsed_minutes, elapsed_seconds = divmod(elapsed, 60)
    remaining_minutes, remaining_seconds = divmod(remaining, 60)
    marker = (
        f"[{elapsed_minutes:02d}:{elapsed_seconds:02d}"
        f"│{remaining_minutes:02d}:{remaining_seconds:02d}]"
    )

    return (
        "```"
        "╔══════╕" + " " * (width - 1) + "╒══════╗\n"
        "║" + "•" * shift + marker + "•" * (width - shift) + "║\n"
        "╚══════╛" + " " * (width - 1) + "╘══════╝"
        "```"
    )
