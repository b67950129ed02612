"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class UsageError(DomainError):
    """Raised when user supplied text cannot be interpreted.

    ``text`` is the offending fragment, ``topic`` names the help topic that
    explains the expected syntax.
    """

    def __init__(self, message: str, text: str = "", topic: str | None = None) -> None:
        super().__init__(message, code="USAGE_ERROR")
        self.text = text
        self.topic = topic


class ExecutionError(DomainError):
    """Raised when a well-formed request cannot be satisfied in the current state."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message, code=code or "EXECUTION_ERROR")


class AdapterError(ExecutionError):
    """Raised when the playback backend fails to start or control a track."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason, code="ADAPTER_ERROR")
        self.reason = reason


class VoiceChannelRequiredError(ExecutionError):
    """Raised when a command needs a voice connection that is missing."""

    def __init__(self, message: str, *, bot: bool = False) -> None:
        super().__init__(message, code="VOICE_CHANNEL_REQUIRED")
        self.bot = bot


class CommandChannelError(ExecutionError):
    """Raised when a command is issued outside the configured command channels."""

    def __init__(self, message: str, channel_id: int) -> None:
        super().__init__(message, code="NOT_IN_COMMAND_CHANNEL")
        self.channel_id = channel_id
