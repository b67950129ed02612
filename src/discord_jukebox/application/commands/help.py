"""Help pages for every command and for the track addressing syntax."""

from __future__ import annotations

from enum import Enum


class HelpTopic(Enum):
    """Topics accepted by the ``help`` command; values are what users type."""

    GENERAL = ""
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
    TRACK_INDEX = "track-index"
    TRACK_RANGE = "track-range"
    TRACK_SET = "track-set"

    @classmethod
    def lookup(cls, name: str | None) -> HelpTopic | None:
        """Return the topic called *name*, ``GENERAL`` for no name, ``None`` if unknown."""
        try:
            return cls((name or "").strip())
        except ValueError:
            return None


_SYNTAX_TOPICS = (HelpTopic.TRACK_INDEX, HelpTopic.TRACK_RANGE, HelpTopic.TRACK_SET)

_SECTIONS: tuple[tuple[str, tuple[HelpTopic, ...]], ...] = (
    (
        "Playback control",
        (
            HelpTopic.PLAY,
            HelpTopic.STOP,
            HelpTopic.NEXT,
            HelpTopic.PREV,
            HelpTopic.GOTO,
            HelpTopic.PAUSE,
            HelpTopic.RESUME,
            HelpTopic.SEEK,
        ),
    ),
    (
        "Queue management",
        (HelpTopic.ENQUEUE, HelpTopic.REMOVE, HelpTopic.REVERSE, HelpTopic.MOVE, HelpTopic.QUOTA),
    ),
    ("Status info", (HelpTopic.PRINT, HelpTopic.NOW, HelpTopic.WHEN)),
    ("Bot control", (HelpTopic.JOIN, HelpTopic.LEAVE)),
)

_USAGE: dict[HelpTopic, tuple[str, str]] = {
    HelpTopic.HELP: ("help [<command>]", "shows the help page of a command or topic"),
    HelpTopic.JOIN: ("join", "makes the bot follow you into your voice channel"),
    HelpTopic.LEAVE: ("leave", "makes the bot leave the voice channel"),
    HelpTopic.ENQUEUE: ("+ <track-reference> [<comment>]", "adds tracks or whole lists to the queue"),
    HelpTopic.PAUSE: ("pause", "pauses the current track; `resume` continues it"),
    HelpTopic.RESUME: ("resume", "resumes a paused track"),
    HelpTopic.STOP: ("stop", "stops the playback; `play` starts the stopped track again"),
    HelpTopic.PLAY: ("play", "starts the queue at the current position or restarts the current track"),
    HelpTopic.PRINT: ("print [<track-set>]", "shows the playback queue"),
    HelpTopic.GOTO: ("goto <track-index>", "continues the playback at the given track"),
    HelpTopic.NEXT: ("next", "skips the current track"),
    HelpTopic.PREV: ("prev", "goes back to the previous track"),
    HelpTopic.REMOVE: ("- <track-set>", "removes tracks from the queue"),
    HelpTopic.SEEK: ("seek <position>", "jumps to a position within the current track"),
    HelpTopic.NOW: ("now", "shows the current track and its playback position"),
    HelpTopic.REVERSE: ("reverse <track-set>", "reverses the order of tracks or swaps two of them"),
    HelpTopic.QUOTA: ("quota [<quota>|off]", "limits how many upcoming tracks a single user may hold"),
    HelpTopic.MOVE: ("move <track-set> to <track-index>", "moves tracks to another place in the queue"),
    HelpTopic.WHEN: ("when <track-index>", "tells how long until the given track starts"),
}

_SYNTAX_OVERVIEW: dict[HelpTopic, str] = {
    HelpTopic.TRACK_INDEX: (
        "`<n>`|`+<n>`|`-<n>`|`start`|`now`|`end`|`next`|`prev` - addresses a single slot of the queue"
    ),
    HelpTopic.TRACK_RANGE: (
        "`[<from>]..[<to>]`|`all`|`history`|`future`|`now` - addresses consecutive tracks"
    ),
    HelpTopic.TRACK_SET: "`<range>,<range>,...`|`other` - addresses any selection of tracks",
}

_DETAILS: dict[HelpTopic, tuple[str, ...]] = {
    HelpTopic.JOIN: (
        "Join a voice channel first, then issue this command. The bot follows you and greets "
        "the text channel once it is ready to play.",
        "If the bot already sits in another voice channel it moves over.",
    ),
    HelpTopic.LEAVE: (
        "Playback stops, but the queue and the current position are kept for the next `join`.",
    ),
    HelpTopic.ENQUEUE: (
        "A track reference is usually the URL of a single track (audiotool, youtube, "
        "soundcloud and everything else yt-dlp understands).",
        "Anything after the reference is shown as a comment in the queue and during playback.",
        "Special references:",
        "· `at:single-charts` - the current audiotool single charts, lowest rank first",
        "· `https://www.audiotool.com/genre/<genre>/charts/<yyyy>-<ww>` - genre charts of a week, "
        "lowest rank first",
        "· `https://www.audiotool.com/album/<album>/` - a whole album",
        "Put one reference per line to enqueue several at once. Backticks around URLs keep "
        "Discord from posting previews.",
    ),
    HelpTopic.STOP: (
        "When the queue ran out of tracks, `stop` also turns off auto-play; otherwise playback "
        "starts again as soon as another track is enqueued.",
    ),
    HelpTopic.PLAY: (
        "When the queue runs out of tracks playback pauses and resumes automatically once a "
        "new track is enqueued.",
    ),
    HelpTopic.PRINT: (
        "Without a selection, 2 tracks before and 15 after the current one are shown (`-2..+15`). "
        "Long listings are split into several messages.",
        "· `print all` - the whole queue",
        "· `print future` - everything still to come",
        "· `print history` - everything played so far",
        "· `print -..` - the current track and everything after it",
        "Tracks marked with `?` are deferred by the quota and may still move.",
        "See `help track-set` for more.",
    ),
    HelpTopic.GOTO: (
        "· `goto +5` - skips five tracks",
        "· `goto 1` - starts over at the beginning of the queue",
        "See `help track-index` for more.",
    ),
    HelpTopic.REMOVE: (
        "When the current track is removed, playback continues with the track that takes its slot.",
        "· `- now` - drops the current track and plays the next one",
        "· `- all` - clears the queue",
        "· `- other` - clears everything except the current track",
        "· `- 10..14` - removes consecutive tracks",
        "· `- 4,6,12` - removes several tracks",
        "See `help track-set` for more.",
    ),
    HelpTopic.SEEK: (
        "Give the position in seconds (`120`) or minutes and seconds (`1:23`).",
        "Seeking past the end continues with the next track. Streams without a known length "
        "may refuse to seek.",
    ),
    HelpTopic.REVERSE: (
        "When the current slot is affected, playback continues with the track that lands there.",
        "· `reverse 3,7` - swaps tracks #3 and #7",
        "· `reverse 1..10` - reverses tracks #1 to #10, handy for charts",
        "See `help track-set` for more.",
    ),
    HelpTopic.QUOTA: (
        "With a quota of `2` each user holds at most two upcoming tracks; further tracks of "
        "that user are _deferred_ and other users' tracks are played first.",
        "Deferred tracks are marked with `?` in `print`. Whenever the queue changes, deferred "
        "tracks are made final where the quota allows. A final track never becomes deferred again.",
        "· `quota 1` - one upcoming track per user, the fairest setting",
        "· `quota off` or `quota 0` - every enqueued track is final",
        "Without an argument the current setting is shown.",
    ),
    HelpTopic.MOVE: (
        "Works like removing the tracks and inserting them again in front of the destination. "
        "Selected tracks keep their original order, the order typed in the selection does not matter.",
        "· `move 5 to next` - plays track #5 after the current one",
        "· `move 10 to now` - plays track #10 right away",
        "· `move 10..15 to end` - moves tracks #10 to #15 to the end of the queue",
        "See `help track-set` and `help track-index` for more.",
    ),
    HelpTopic.WHEN: (
        "Tracks with an unknown length make the answer a lower bound. Deferred tracks may "
        "still move in either direction.",
        "· `when 7` - time until track #7 starts",
        "· `when end` - time until the queue runs out",
        "See `help track-index` for more.",
    ),
    HelpTopic.TRACK_INDEX: (
        "Indices are absolute or, when they carry a sign, relative to the current track.",
        "· `5` - track #5",
        "· `1` or `start` - the first track",
        "· `end` - the empty slot after the last track, e.g. for `when end` or `goto end`",
        "· `+1` or `next` - the track after the current one",
        "· `-1` or `prev` - the track before the current one",
        "· `+`, `-`, `0` or `now` - the current track",
    ),
    HelpTopic.TRACK_RANGE: (
        "A range joins two track indices with `..`; both ends are included. Without a start "
        "the range begins at the first track, without an end it stops at the last one.",
        "· `4..9` - tracks #4 to #9",
        "· `+1..+4` - the next four tracks",
        "· `all`, `..` or `1..` - every track",
        "· `future` or `next..` - everything after the current track",
        "· `history` or `..prev` - everything before the current track",
        "A range whose end lies before its start selects nothing.",
    ),
    HelpTopic.TRACK_SET: (
        "A track set lists indices and ranges separated by commas. See `help track-range` "
        "and `help track-index`.",
        "· `4,6,9` - tracks #4, #6 and #9",
        "· `other` - everything except the current track",
        "Duplicates count once, and tracks always keep their order in the queue.",
    ),
}


def overview(topic: HelpTopic, prefix: str) -> str:
    """One-line summary of *topic*."""
    if topic in _SYNTAX_OVERVIEW:
        return _SYNTAX_OVERVIEW[topic]
    usage, summary = _USAGE[topic]
    return f"`{prefix}{usage}` - {summary}"


def render_help(topic: HelpTopic, prefix: str) -> str:
    """Full help page for *topic* using the configured command *prefix*."""
    if topic is HelpTopic.GENERAL:
        lines = [
            f"All commands follow the syntax `{prefix}<command> [<args>]`",
            overview(HelpTopic.HELP, prefix),
        ]
        for title, topics in _SECTIONS:
            lines.append(f"**{title}**")
            lines.extend(overview(t, prefix) for t in topics)
        lines.append("**Other help topics**")
        lines.extend(
            f"`{prefix}help {t.value}` - {_SYNTAX_OVERVIEW[t]}" for t in _SYNTAX_TOPICS
        )
        return "\n".join(lines)

    lines = [overview(topic, prefix)]
    if topic is HelpTopic.HELP:
        names = ", ".join(f"`{t.value}`" for t in HelpTopic if t is not HelpTopic.GENERAL)
        lines.append(f"e.g. `{prefix}help play`")
        lines.append(f"Topics: {names} (or nothing for an overview)")
    lines.extend(_DETAILS.get(topic, ()))
    return "\n".join(lines)
