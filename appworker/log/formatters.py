"""
Log formatter rendering structured extra fields.

Output layout (without colors):

    [12:34:56,789] [I] worker exited              [code:0] [user:alice] [4242] [/appworker]
"""

import logging
import re
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants

# Pattern to match ANSI escape sequences
_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def _visual_len(text: str) -> int:
    """Calculate visual width of text, excluding ANSI escape codes."""
    if "\x1b" not in text:
        return len(text)
    return len(_ANSI_PATTERN.sub("", text))


def _render_value(value: Any) -> str:
    if isinstance(value, BaseException):
        return value.__class__.__name__
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def _escape(text: str) -> str:
    """Escape percent signs so rendered values survive %-style formatting."""
    return text.replace("%", "%%")


class PreFormatter(logging.Formatter):
    """Standard formatter with optional microsecond timestamps."""

    def __init__(self, fmt: str, micros: bool) -> None:
        self._micros = micros
        super().__init__(fmt)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        s = super().formatTime(record, "%H:%M:%S")
        s = f"{s},{int(record.msecs):03d}"
        if self._micros:
            s += f".{int(record.created * 1_000_000) % 1000:03d}"
        return s


class LogFormatter(logging.Formatter):
    """
    Formatter producing aligned, optionally colored, structured log lines.

    Extra fields attached by Logger are rendered sorted by key after the
    message, followed by the process id and logger name.
    """

    def __init__(self, config: LogConfig):
        super().__init__()
        self._config = config
        self._pre_formatter = PreFormatter(LogConstants.DEFAULT_FORMAT, config.micros)

    def format(self, record: logging.LogRecord) -> str:
        width = self._calculate_width(record)
        if self._config.colors:
            fmt = self._format_colored(record, width)
        else:
            fmt = self._format_plain(record, width)

        self._pre_formatter._fmt = fmt
        self._pre_formatter._style._fmt = fmt
        return self._pre_formatter.format(record)

    def _calculate_width(self, record: logging.LogRecord) -> int:
        # "[" + timestamp + "] [" + level(1) + "] " + message
        timestamp_len = 16 if self._config.micros else 12
        return 1 + timestamp_len + 4 + 1 + 2 + _visual_len(record.getMessage())

    def _rule(self) -> int:
        if self._config.micros:
            return LogConstants.MICRO_RULE_WIDTH
        return LogConstants.DEFAULT_RULE_WIDTH

    @staticmethod
    def _extra_items(record: logging.LogRecord) -> list[tuple[str, str]]:
        extra = getattr(record, "__appworker__extra", None)
        if not extra:
            return []
        return [(key, _escape(_render_value(extra[key]))) for key in sorted(extra)]

    def _format_plain(self, record: logging.LogRecord, width: int) -> str:
        fmt = LogConstants.DEFAULT_FORMAT
        fmt += " " * max(1, self._rule() - width)
        parts = [f"[{key}:{value}]" for key, value in self._extra_items(record)]
        if parts:
            fmt += " ".join(parts) + " "
        fmt += "[%(process)d] [%(name)s]"
        return fmt

    def _format_colored(self, record: logging.LogRecord, width: int) -> str:
        col = ColorManager.get_color_for_level(record.levelno)
        bold = ColorManager.create_bold_color(col)
        col += "m"
        reset = ColorManager.RESET

        fmt = col + "[%(asctime)s] [" + bold + "%(levelname).1s" + reset + col + "] "
        fmt += bold + "%(message)s" + reset + col
        fmt += " " * max(1, self._rule() - width)
        for key, value in self._extra_items(record):
            fmt += f"{key}[{bold}{value}{reset}{col}] "

        gray = ColorManager.create_gray_level(9) + "m"
        fmt += gray + "[%(process)d] [%(name)s]" + reset
        return fmt
