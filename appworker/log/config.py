"""
Configuration for the logging system.

LogConfig is immutable so that a logger's display settings cannot drift after
the factory has built its handler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .constants import LogConstants
from .exceptions import InvalidLogLevelError


def resolve_level(level: str | int | bool) -> int | bool:
    """
    Resolve log level from string, numeric value, or boolean.

    Args:
        level: Log level as string name, numeric value, or False to disable logging

    Returns:
        Numeric log level or False to disable logging

    Raises:
        InvalidLogLevelError: If the log level is invalid
    """
    if isinstance(level, bool):
        return False if not level else logging.INFO
    if isinstance(level, int):
        return level
    if level.isnumeric():
        return int(level)
    key = level.lower()
    if key in LogConstants.LEVEL_NAMES:
        return LogConstants.LEVEL_NAMES[key]
    raise InvalidLogLevelError(level)


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable logger configuration.

    Attributes:
        level: Numeric level, or False to disable logging entirely
        micros: Show microsecond precision timestamps
        colors: Emit ANSI colors
    """

    level: int | bool = logging.INFO
    micros: bool = False
    colors: bool = True

    @classmethod
    def from_params(
        cls, level: str | int | bool, micros: bool = False, colors: bool = True
    ) -> LogConfig:
        """Create LogConfig from individual parameters."""
        return cls(level=resolve_level(level), micros=micros, colors=colors)

    @classmethod
    def from_config(cls, config_dict: dict[str, Any], section: str = "logging") -> LogConfig:
        """
        Create LogConfig from a configuration dictionary.

        Args:
            config_dict: Configuration dictionary (e.g., from load_config)
            section: Dotted path of the logging section (default: "logging")

        Example:
            config = load_config("etc/appworker.yaml")
            log_config = LogConfig.from_config(config)
        """
        current: Any = config_dict
        for part in section.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                current = {}
                break
        if not isinstance(current, dict):
            current = {}

        level = current.get("level", "info")
        if level == "false":
            level = False

        return cls.from_params(
            level=level,
            micros=current.get("micros", False),
            colors=current.get("colors", True),
        )
