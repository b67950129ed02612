"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QueueChange:
    """Outcome of a structural queue mutation.

    ``count`` is the number of entries the mutation touched and
    ``current_changed`` tells whether a different entry (or none) sits under
    the cursor afterwards, which means playback has to be restarted.
    """

    count: int = 0
    current_changed: bool = False


@dataclass(frozen=True)
class WaitEstimate:
    """Time until a queue position starts playing."""

    position: int
    seconds: int
    is_lower_bound: bool = False
    reaches_end: bool = False

    @property
    def number(self) -> int:
        return self.position + 1

    @property
    def formatted(self) -> str:
        hours, remainder = divmod(self.seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours}:{minutes:02d}:{seconds:02d}"
