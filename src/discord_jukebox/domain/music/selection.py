"""Track addressing: indices, ranges and selections relative to a queue.

Users address tracks with a small language. A single index is anchored at the
start of the queue, the current position or the end of the queue::

    3      third track (user numbers are 1-based)
    +2     two tracks after the current one
    -1     the track before the current one
    end    the empty slot after the last track

Ranges join two indices with ``..`` (both ends inclusive, either side may be
omitted) and selections join ranges with commas.  Resolution always happens
against a ``(cursor, length)`` pair so the same expression means different
positions as the queue changes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from discord_jukebox.domain.shared.exceptions import UsageError
from discord_jukebox.domain.shared.messages import ErrorMessages

_SIGNED_NUMBER: Final[re.Pattern[str]] = re.compile(r"[+-]?\d+")
_NUMBER: Final[re.Pattern[str]] = re.compile(r"\d+")

RANGE_SEPARATOR: Final[str] = ".."
SELECTION_SEPARATOR: Final[str] = ","


class IndexAnchor(Enum):
    """Reference point an index offset is measured from."""

    START = "start"
    CURRENT = "current"
    END = "end"


class ResolutionKind(Enum):
    """Classification of a resolved raw position against the queue bounds."""

    TOO_SMALL = "too_small"
    OK = "ok"
    END = "end"
    TOO_BIG = "too_big"


@dataclass(frozen=True)
class IndexResolution:
    """A raw queue position together with its classification."""

    kind: ResolutionKind
    position: int

    @property
    def is_ok(self) -> bool:
        return self.kind is ResolutionKind.OK

    @property
    def is_end(self) -> bool:
        return self.kind is ResolutionKind.END

    @property
    def is_out_of_bounds(self) -> bool:
        return self.kind in (ResolutionKind.TOO_SMALL, ResolutionKind.TOO_BIG)

    @property
    def number(self) -> int:
        """1-based slot number for user-facing messages."""
        return self.position + 1


@dataclass(frozen=True)
class TrackIndex:
    """A single queue position relative to an anchor."""

    anchor: IndexAnchor
    offset: int = 0

    @classmethod
    def start(cls, offset: int = 0) -> TrackIndex:
        return cls(IndexAnchor.START, offset)

    @classmethod
    def current(cls, offset: int = 0) -> TrackIndex:
        return cls(IndexAnchor.CURRENT, offset)

    @classmethod
    def end(cls, offset: int = 0) -> TrackIndex:
        return cls(IndexAnchor.END, offset)

    @classmethod
    def parse(cls, text: str, topic: str = "track-index") -> TrackIndex:
        """Parse a single index expression.

        Raises:
            UsageError: If *text* is empty or not a valid index.
        """
        stripped = text.strip()
        keyword = _KEYWORDS.get(stripped)
        if keyword is not None:
            return keyword

        if stripped.startswith("+"):
            rest = stripped[1:].strip()
            if not rest:
                return cls.current(0)
            if _SIGNED_NUMBER.fullmatch(rest):
                return cls.current(int(rest))
        elif stripped.startswith("-"):
            rest = stripped[1:].strip()
            if not rest:
                return cls.current(0)
            if _NUMBER.fullmatch(rest):
                return cls.current(-int(rest))
        elif _NUMBER.fullmatch(stripped):
            number = int(stripped)
            return cls.current(0) if number == 0 else cls.start(number - 1)

        raise UsageError(ErrorMessages.INVALID_TRACK_INDEX.format(text=text), text, topic)

    def raw_position(self, cursor: int, length: int) -> int:
        if self.anchor is IndexAnchor.START:
            return self.offset
        if self.anchor is IndexAnchor.CURRENT:
            return cursor + self.offset
        return length + self.offset

    def resolve(self, cursor: int, length: int) -> IndexResolution:
        raw = self.raw_position(cursor, length)
        if raw < 0:
            kind = ResolutionKind.TOO_SMALL
        elif raw < length:
            kind = ResolutionKind.OK
        elif raw == length:
            kind = ResolutionKind.END
        else:
            kind = ResolutionKind.TOO_BIG
        return IndexResolution(kind, raw)


_KEYWORDS: Final[dict[str, TrackIndex]] = {
    "start": TrackIndex.start(0),
    "end": TrackIndex.end(0),
    "now": TrackIndex.current(0),
    "next": TrackIndex.current(1),
    "prev": TrackIndex.current(-1),
}


@dataclass(frozen=True)
class TrackIndexRange:
    """Either a single index or an inclusive ``first..last`` span.

    A reversed span (first after last) covers no positions at all.
    """

    first: TrackIndex
    last: TrackIndex | None = None

    @classmethod
    def single(cls, index: TrackIndex) -> TrackIndexRange:
        return cls(index)

    @classmethod
    def span(cls, first: TrackIndex, last: TrackIndex) -> TrackIndexRange:
        return cls(first, last)

    @classmethod
    def all(cls) -> TrackIndexRange:
        return cls.span(TrackIndex.start(0), TrackIndex.end(0))

    @classmethod
    def history(cls) -> TrackIndexRange:
        return cls.span(TrackIndex.start(0), TrackIndex.current(-1))

    @classmethod
    def future(cls) -> TrackIndexRange:
        return cls.span(TrackIndex.current(1), TrackIndex.end(0))

    @classmethod
    def now(cls) -> TrackIndexRange:
        return cls.single(TrackIndex.current(0))

    @property
    def is_single(self) -> bool:
        return self.last is None

    @classmethod
    def parse(cls, text: str, topic: str = "track-range") -> TrackIndexRange:
        """Parse a range expression.

        Raises:
            UsageError: If either side of the range is not a valid index.
        """
        stripped = text.strip()
        literal = _RANGE_LITERALS.get(stripped)
        if literal is not None:
            return literal()

        if RANGE_SEPARATOR not in stripped:
            return cls.single(TrackIndex.parse(stripped, topic))

        head, tail = stripped.split(RANGE_SEPARATOR, 1)
        first = TrackIndex.parse(head, topic) if head.strip() else TrackIndex.start(0)
        last = TrackIndex.parse(tail, topic) if tail.strip() else TrackIndex.end(0)
        return cls.span(first, last)

    def resolve(self, cursor: int, length: int) -> range:
        """Resolve to a half-open interval of existing positions."""
        first = self.first.resolve(cursor, length)
        if self.last is None:
            if first.is_ok:
                return range(first.position, first.position + 1)
            return range(0)

        last = self.last.resolve(cursor, length)
        if last.kind is ResolutionKind.TOO_SMALL:
            return range(0)
        if first.kind in (ResolutionKind.END, ResolutionKind.TOO_BIG):
            return range(0)

        begin = 0 if first.kind is ResolutionKind.TOO_SMALL else first.position
        stop = last.position + 1 if last.is_ok else length
        if begin > stop:
            return range(0)
        return range(begin, stop)


_RANGE_LITERALS = {
    "all": TrackIndexRange.all,
    "history": TrackIndexRange.history,
    "future": TrackIndexRange.future,
    "now": TrackIndexRange.now,
}


@dataclass(frozen=True)
class TrackIndexSelection:
    """Union of ranges, e.g. ``1..3, 7, -2..``."""

    ranges: tuple[TrackIndexRange, ...] = ()

    @classmethod
    def of(cls, *ranges: TrackIndexRange) -> TrackIndexSelection:
        return cls(tuple(ranges))

    @classmethod
    def other(cls) -> TrackIndexSelection:
        """Everything except the current position."""
        return cls.of(TrackIndexRange.history(), TrackIndexRange.future())

    @classmethod
    def parse(cls, text: str, topic: str = "track-set") -> TrackIndexSelection:
        """Parse a comma-separated selection; blank parts are skipped.

        Raises:
            UsageError: If any part is not a valid range.
        """
        stripped = text.strip()
        if stripped == "other":
            return cls.other()

        ranges = [
            TrackIndexRange.parse(part, topic)
            for part in stripped.split(SELECTION_SEPARATOR)
            if part.strip()
        ]
        return cls(tuple(ranges))

    @property
    def is_empty(self) -> bool:
        return not self.ranges

    def resolve(self, cursor: int, length: int) -> set[int]:
        positions: set[int] = set()
        for index_range in self.ranges:
            positions.update(index_range.resolve(cursor, length))
        return positions
