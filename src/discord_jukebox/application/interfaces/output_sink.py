"""Port interface for human-facing status output."""

from __future__ import annotations

from abc import ABC, abstractmethod


class OutputSink(ABC):
    """Fire-and-forget destination for status messages."""

    @abstractmethod
    async def print(self, text: str) -> None:
        """Deliver *text*; delivery failures are handled by the implementation."""
        ...

    def adopt_channel(self, channel_id: int) -> None:
        """Use *channel_id* unless a fixed destination was configured."""
        return None
