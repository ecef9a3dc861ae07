"""
Structured logging for the application worker.

Extends Python's standard logging with:
- Extra fields rendered as ``[key:value]`` after the message
- Colored console output with ANSI escape sequences
- Microsecond precision timestamps
- A TRACE level below DEBUG
- Complete logging disable (level=False or level="false")
"""

import logging

from .config import LogConfig, resolve_level
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter
from .logger import Logger

logging.addLevelName(LogConstants.CUSTOM_LEVELS["TRACE"], "TRACE")


def create_root_lg(
    level: str | int | bool = "info", micros: bool = False, colors: bool = True
) -> Logger:
    """
    Create a root logger with the specified configuration.

    Args:
        level: Log level name, numeric value, or False to disable logging
        micros: Show microsecond timestamps
        colors: Emit ANSI colors

    Returns:
        Configured root logger
    """
    return LoggerFactory.create_root(LogConfig.from_params(level, micros, colors))


__all__ = [
    "Logger",
    "LogConfig",
    "LogConstants",
    "LogFormatter",
    "LoggerFactory",
    "LogError",
    "InvalidLogLevelError",
    "create_root_lg",
    "resolve_level",
]
