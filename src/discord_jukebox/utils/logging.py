"""Logging setup: colored console formatter and dictConfig loading."""

from __future__ import annotations

import json
import logging
import logging.config
import os
import sys
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO (one line per HTTP request or
# gateway event) and only interesting when debugging them.
NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "discord.gateway", "discord.voice_state")


class ColoredFormatter(logging.Formatter):
    """Logging formatter that applies ANSI color codes to the levelname field.

    Colors are disabled when the ``NO_COLOR`` environment variable is set or
    when the output stream is not a TTY (e.g. redirected to a file).
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = getattr(self, "_stream", None) or sys.stderr
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self._use_color():
            color = self.COLORS.get(record.levelno, "")
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def configure_logging(log_level: str, config_path: Path | None = None) -> bool:
    """Apply *config_path* via ``dictConfig`` or fall back to a colored console handler.

    Returns True when the JSON config was applied.  The root level is always
    set to *log_level*; :data:`NOISY_LOGGERS` are capped at WARNING unless
    debugging.
    """
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    applied = False
    if config_path is not None:
        try:
            with open(config_path) as f:
                config = json.load(f)
            logging.config.dictConfig(config)
            applied = True
        except (FileNotFoundError, json.JSONDecodeError, ValueError):
            logging.warning("Could not load %s, falling back to basic config", config_path)

    if not applied:
        handler = logging.StreamHandler()
        handler.setFormatter(ColoredFormatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT))
        logging.basicConfig(level=resolved_level, handlers=[handler], force=True)

    logging.getLogger().setLevel(resolved_level)
    if resolved_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    return applied
