"""Parsing of chat command lines into :class:`Command` objects."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from ...domain.music.selection import TrackIndex, TrackIndexSelection
from ...domain.shared.exceptions import UsageError
from ...domain.shared.messages import ErrorMessages
from ...utils.reply import parse_timestamp
from ..services.enqueue_service import EnqueueRequest
from .help import HelpTopic

_MOVE_SEPARATOR: Final[re.Pattern[str]] = re.compile(r"\s+to\s+")
_REFERENCE_TRIM: Final[str] = " `\t"


class CommandKind(Enum):
    HELP = "help"
    JOIN = "join"
    LEAVE = "leave"
    ENQUEUE = "+"
    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"
    PLAY = "play"
    PRINT = "print"
    GOTO = "goto"
    NEXT = "next"
    PREV = "prev"
    REMOVE = "-"
    SEEK = "seek"
    NOW = "now"
    REVERSE = "reverse"
    QUOTA = "quota"
    MOVE = "move"
    WHEN = "when"

    @property
    def requires_voice(self) -> bool:
        """Whether the author has to sit in a voice channel to issue the command."""
        return self not in _READ_ONLY

    @property
    def topic(self) -> HelpTopic:
        return HelpTopic(self.value)


_READ_ONLY: Final[frozenset[CommandKind]] = frozenset(
    {CommandKind.HELP, CommandKind.PRINT, CommandKind.NOW, CommandKind.WHEN}
)


@dataclass(frozen=True)
class Command:
    """A parsed command; only the fields relevant for ``kind`` are set.

    ``quota`` is ``None`` for a query and ``0`` to switch the quota off.
    ``selection`` is ``None`` for ``print`` without arguments.
    """

    kind: CommandKind
    topic: HelpTopic = HelpTopic.GENERAL
    requests: tuple[EnqueueRequest, ...] = ()
    selection: TrackIndexSelection | None = None
    index: TrackIndex | None = None
    seconds: int | None = None
    quota: int | None = None

    @property
    def requires_voice(self) -> bool:
        return self.kind.requires_voice


def _split(command_line: str) -> tuple[str, str]:
    parts = command_line.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    name = parts[0]
    args = parts[1].strip() if len(parts) > 1 else ""
    return name, args


def parse_enqueue_requests(args: str) -> tuple[EnqueueRequest, ...]:
    """One reference per line, optionally followed by a comment; blank lines are skipped."""
    requests = []
    for line in args.splitlines():
        parts = line.strip(" \t").split(maxsplit=1)
        if not parts:
            continue
        reference = parts[0].strip(_REFERENCE_TRIM)
        if not reference:
            continue
        comment = parts[1].strip(_REFERENCE_TRIM) if len(parts) > 1 else ""
        requests.append(EnqueueRequest(reference, comment or None))
    return tuple(requests)


def _parse_selection(args: str, kind: CommandKind, *, required: bool) -> TrackIndexSelection:
    try:
        selection = TrackIndexSelection.parse(args)
    except UsageError as e:
        raise UsageError(e.message, e.text, kind.topic.value) from e
    if required and selection.is_empty:
        raise UsageError(ErrorMessages.MISSING_SELECTION, args, kind.topic.value)
    return selection


def _parse_index(args: str, kind: CommandKind) -> TrackIndex:
    if not args:
        raise UsageError(ErrorMessages.EMPTY_TRACK_INDEX, args, kind.topic.value)
    try:
        return TrackIndex.parse(args)
    except UsageError as e:
        raise UsageError(e.message, e.text, kind.topic.value) from e


def parse_command_line(command_line: str) -> Command:
    """Parse a command line with the prefix already removed.

    An empty line asks for the general help page.

    Raises:
        UsageError: If the command is unknown or its arguments are malformed.
            ``topic`` names the help page to show alongside the message.
    """
    name, args = _split(command_line)
    if not name:
        return Command(CommandKind.HELP)

    try:
        kind = CommandKind(name)
    except ValueError:
        raise UsageError(
            ErrorMessages.UNKNOWN_COMMAND.format(name=name), name, HelpTopic.GENERAL.value
        ) from None

    if kind is CommandKind.HELP:
        topic = HelpTopic.lookup(args)
        if topic is None:
            raise UsageError(
                ErrorMessages.UNKNOWN_HELP_TOPIC.format(topic=args), args, HelpTopic.HELP.value
            )
        return Command(kind, topic=topic)

    if kind is CommandKind.ENQUEUE:
        requests = parse_enqueue_requests(args)
        if not requests:
            raise UsageError(ErrorMessages.MISSING_TRACK_REFERENCE, args, kind.topic.value)
        return Command(kind, requests=requests)

    if kind is CommandKind.PLAY and args:
        raise UsageError(ErrorMessages.PLAY_TAKES_NO_ARGUMENTS, args, kind.topic.value)

    if kind is CommandKind.PRINT:
        selection = _parse_selection(args, kind, required=False)
        return Command(kind, selection=None if selection.is_empty else selection)

    if kind in (CommandKind.REMOVE, CommandKind.REVERSE):
        return Command(kind, selection=_parse_selection(args, kind, required=True))

    if kind in (CommandKind.GOTO, CommandKind.WHEN):
        return Command(kind, index=_parse_index(args, kind))

    if kind is CommandKind.SEEK:
        seconds = parse_timestamp(args)
        if seconds is None:
            raise UsageError(
                ErrorMessages.INVALID_SEEK_POSITION.format(text=args), args, kind.topic.value
            )
        return Command(kind, seconds=seconds)

    if kind is CommandKind.QUOTA:
        if not args:
            return Command(kind)
        if args == "off":
            return Command(kind, quota=0)
        if not args.isdecimal():
            raise UsageError(ErrorMessages.INVALID_QUOTA.format(text=args), args, kind.topic.value)
        return Command(kind, quota=int(args))

    if kind is CommandKind.MOVE:
        parts = _MOVE_SEPARATOR.split(f" {args} ", maxsplit=1)
        source = parts[0]
        selection = _parse_selection(source, kind, required=True)
        if len(parts) < 2 or not parts[1].strip():
            raise UsageError(ErrorMessages.MISSING_MOVE_DESTINATION, args, kind.topic.value)
        return Command(kind, selection=selection, index=_parse_index(parts[1].strip(), kind))

    return Command(kind)
