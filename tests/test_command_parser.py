"""
Unit Tests for Command Parsing

Tests for:
- Command name lookup and the empty command line
- help topics
- Enqueue references with comments, one per line
- Selections, indices, seek positions, quota and move arguments
- UsageError topics pointing at the right help page
"""

import pytest

from discord_jukebox.application.commands.help import HelpTopic, render_help
from discord_jukebox.application.commands.parser import (
    CommandKind,
    parse_command_line,
    parse_enqueue_requests,
)
from discord_jukebox.application.services.enqueue_service import EnqueueRequest
from discord_jukebox.domain.music.selection import TrackIndex, TrackIndexSelection
from discord_jukebox.domain.shared.exceptions import UsageError
from discord_jukebox.domain.shared.messages import ErrorMessages


class TestCommandNames:
    """Tests for recognizing commands."""

    def test_empty_line_is_general_help(self):
        command = parse_command_line("   ")

        assert command.kind is CommandKind.HELP
        assert command.topic is HelpTopic.GENERAL

    @pytest.mark.parametrize(
        "line,kind",
        [
            ("join", CommandKind.JOIN),
            ("leave", CommandKind.LEAVE),
            ("pause", CommandKind.PAUSE),
            ("resume", CommandKind.RESUME),
            ("stop", CommandKind.STOP),
            ("play", CommandKind.PLAY),
            ("next", CommandKind.NEXT),
            ("prev", CommandKind.PREV),
            ("now", CommandKind.NOW),
        ],
    )
    def test_argumentless_commands(self, line, kind):
        assert parse_command_line(line).kind is kind

    def test_unknown_command(self):
        """Should point at the general help page."""
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("dance wildly")

        assert exc_info.value.message == ErrorMessages.UNKNOWN_COMMAND.format(name="dance")
        assert exc_info.value.topic == HelpTopic.GENERAL.value

    def test_commands_are_case_sensitive(self):
        with pytest.raises(UsageError):
            parse_command_line("PLAY")

    def test_play_rejects_arguments(self):
        """'play <url>' is a common mistake for '+ <url>'."""
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("play https://example.com/song")

        assert exc_info.value.message == ErrorMessages.PLAY_TAKES_NO_ARGUMENTS
        assert exc_info.value.topic == "play"

    def test_read_only_commands_need_no_voice(self):
        for line in ("help", "print", "now", "when 3"):
            assert parse_command_line(line).requires_voice is False
        for line in ("join", "play", "- 1", "quota 2"):
            assert parse_command_line(line).requires_voice is True


class TestHelp:
    def test_help_topic(self):
        command = parse_command_line("help move")

        assert command.kind is CommandKind.HELP
        assert command.topic is HelpTopic.MOVE

    def test_help_syntax_topic(self):
        assert parse_command_line("help track-set").topic is HelpTopic.TRACK_SET

    def test_unknown_help_topic(self):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("help dance")

        assert exc_info.value.topic == "help"

    def test_every_topic_renders(self):
        """Every help page renders with the configured prefix."""
        for topic in HelpTopic:
            page = render_help(topic, "/al ")
            assert page
        assert render_help(HelpTopic.GENERAL, "/al ").startswith(
            "All commands follow the syntax `/al <command> [<args>]`"
        )


class TestEnqueue:
    """Tests for '+' arguments."""

    def test_single_reference(self):
        command = parse_command_line("+ https://www.audiotool.com/track/abc")

        assert command.kind is CommandKind.ENQUEUE
        assert command.requests == (EnqueueRequest("https://www.audiotool.com/track/abc"),)

    def test_reference_with_comment(self):
        command = parse_command_line("+ `https://youtu.be/x` what a tune")

        assert command.requests == (EnqueueRequest("https://youtu.be/x", "what a tune"),)

    def test_multiple_lines(self):
        requests = parse_enqueue_requests("https://a.example/1\n\n  https://b.example/2 nice\n")

        assert requests == (
            EnqueueRequest("https://a.example/1"),
            EnqueueRequest("https://b.example/2", "nice"),
        )

    def test_missing_reference(self):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("+")

        assert exc_info.value.message == ErrorMessages.MISSING_TRACK_REFERENCE
        assert exc_info.value.topic == "+"


class TestSelections:
    """Tests for commands taking a track set."""

    def test_print_without_selection(self):
        command = parse_command_line("print")

        assert command.kind is CommandKind.PRINT
        assert command.selection is None

    def test_print_with_selection(self):
        command = parse_command_line("print 1..3")

        assert command.selection == TrackIndexSelection.parse("1..3")

    def test_remove_requires_selection(self):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("-")

        assert exc_info.value.message == ErrorMessages.MISSING_SELECTION
        assert exc_info.value.topic == "-"

    def test_remove_selection(self):
        command = parse_command_line("- 4,6,12")

        assert command.kind is CommandKind.REMOVE
        assert command.selection.resolve(0, 20) == {3, 5, 11}

    def test_reverse_invalid_selection_reports_command_topic(self):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("reverse 1..x")

        assert exc_info.value.topic == "reverse"


class TestIndices:
    """Tests for goto and when."""

    def test_goto(self):
        command = parse_command_line("goto +5")

        assert command.kind is CommandKind.GOTO
        assert command.index == TrackIndex.current(5)

    def test_when_end(self):
        assert parse_command_line("when end").index == TrackIndex.end()

    def test_goto_missing_index(self):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("goto")

        assert exc_info.value.message == ErrorMessages.EMPTY_TRACK_INDEX
        assert exc_info.value.topic == "goto"

    def test_when_invalid_index(self):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("when soon")

        assert exc_info.value.topic == "when"


class TestSeek:
    @pytest.mark.parametrize("arg,seconds", [("120", 120), ("1:23", 83), ("1:00:05", 3605)])
    def test_positions(self, arg, seconds):
        command = parse_command_line(f"seek {arg}")

        assert command.kind is CommandKind.SEEK
        assert command.seconds == seconds

    @pytest.mark.parametrize("arg", ["", "abc", "-5", "1:2:3:4"])
    def test_invalid_positions(self, arg):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line(f"seek {arg}")

        assert exc_info.value.topic == "seek"


class TestQuota:
    def test_query(self):
        command = parse_command_line("quota")

        assert command.kind is CommandKind.QUOTA
        assert command.quota is None

    def test_off(self):
        assert parse_command_line("quota off").quota == 0

    def test_number(self):
        assert parse_command_line("quota 3").quota == 3

    @pytest.mark.parametrize("arg", ["-1", "two", "1.5"])
    def test_invalid(self, arg):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line(f"quota {arg}")

        assert exc_info.value.message == ErrorMessages.INVALID_QUOTA.format(text=arg)


class TestMove:
    def test_move(self):
        command = parse_command_line("move 3,5 to next")

        assert command.kind is CommandKind.MOVE
        assert command.selection == TrackIndexSelection.parse("3,5")
        assert command.index == TrackIndex.current(1)

    def test_move_range_to_end(self):
        command = parse_command_line("move 10..15   to   end")

        assert command.selection.resolve(0, 20) == set(range(9, 15))
        assert command.index == TrackIndex.end()

    def test_move_missing_destination(self):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("move 3")

        assert exc_info.value.message == ErrorMessages.MISSING_MOVE_DESTINATION
        assert exc_info.value.topic == "move"

    def test_move_missing_selection(self):
        with pytest.raises(UsageError) as exc_info:
            parse_command_line("move to 1")

        assert exc_info.value.message == ErrorMessages.MISSING_SELECTION
