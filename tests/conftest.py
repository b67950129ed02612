from __future__ import annotations

import pytest

from discord_jukebox.application.interfaces.output_sink import OutputSink
from discord_jukebox.application.interfaces.playback_adapter import (
    PlaybackAdapter,
    PlaybackHandle,
)
from discord_jukebox.application.interfaces.track_resolver import Requester
from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.exceptions import AdapterError

ALICE = Requester(user_id=111, name="alice")
BOB = Requester(user_id=222, name="bob")
CAROL = Requester(user_id=333, name="carol")


def make_track(
    title: str = "Test Track",
    requester: Requester = ALICE,
    *,
    duration: int | None = 180,
    **overrides,
) -> Track:
    """Build a playable track requested by *requester*."""
    slug = title.lower().replace(" ", "-")
    fields = {
        "stream_url": f"https://cdn.example.com/{slug}.ogg",
        "webpage_url": f"https://www.example.com/{slug}",
        "title": title,
        "artist": "Test Artist",
        "duration_seconds": duration,
        "requested_by_id": requester.user_id,
        "requested_by_name": requester.name,
    }
    fields.update(overrides)
    return Track(**fields)


def titles(queue) -> list[str | None]:
    return [entry.track.title for entry in queue.entries]


# ============================================================================
# Fakes
# ============================================================================


class FakeOutput(OutputSink):
    """Collects printed text."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.adopted: list[int] = []

    async def print(self, text: str) -> None:
        self.lines.append(text)

    def adopt_channel(self, channel_id: int) -> None:
        self.adopted.append(channel_id)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class FakeHandle(PlaybackHandle):
    def __init__(self, track: Track, position: float = 0.0) -> None:
        self.track = track
        self.position = position
        self.stopped = False
        self.paused = False
        self.seeks: list[float] = []

    def _ensure_live(self) -> None:
        if self.stopped:
            raise AdapterError("stopped")

    def stop(self) -> None:
        self.stopped = True

    def pause(self) -> None:
        self._ensure_live()
        self.paused = True

    def resume(self) -> None:
        self._ensure_live()
        self.paused = False

    def seek(self, position: float) -> None:
        self._ensure_live()
        self.seeks.append(position)
        self.position = position

    def current_position(self) -> float:
        self._ensure_live()
        return self.position


class FakeAdapter(PlaybackAdapter):
    """Records started tracks; ``fail_with`` makes the next starts raise."""

    def __init__(self) -> None:
        self.started: list[FakeHandle] = []
        self.connected: dict[int, int] = {}
        self.callback = None
        self.fail_with: Exception | None = None

    async def connect(self, guild_id: int, channel_id: int) -> None:
        self.connected[guild_id] = channel_id

    async def disconnect(self, guild_id: int) -> None:
        self.connected.pop(guild_id, None)

    def is_connected(self, guild_id: int) -> bool:
        return guild_id in self.connected

    async def start(self, guild_id: int, track: Track) -> FakeHandle:
        if self.fail_with is not None:
            raise self.fail_with
        handle = FakeHandle(track)
        self.started.append(handle)
        return handle

    def set_on_track_end_callback(self, callback) -> None:
        self.callback = callback

    @property
    def last(self) -> FakeHandle:
        return self.started[-1]

    @property
    def started_titles(self) -> list[str | None]:
        return [h.track.title for h in self.started]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def sample_track():
    """Create a sample track for testing."""
    return make_track("Sample Track")


@pytest.fixture
def fake_output():
    return FakeOutput()


@pytest.fixture
def fake_adapter():
    return FakeAdapter()
