"""
Factory for creating and configuring loggers.
"""

import logging
import sys
from typing import Any, TextIO, cast

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def create_root(config: LogConfig, stream: TextIO | None = None) -> Logger:
        """
        Create the "/" root logger.

        Example:
            >>> lg = LoggerFactory.create_root(LogConfig.from_params("info", colors=False))
            >>> lg.info("launcher ready")
            [12:34:56,789] [I] launcher ready                          [1234] [/]
        """
        return LoggerFactory.create("/", config, stream=stream)

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        extra: dict[str, Any] | None = None,
        stream: TextIO | None = None,
    ) -> Logger:
        """
        Create a logger writing formatted records to a stream (stderr by default).

        Returns the existing logger if one with the same name was already created.

        Args:
            name: Logger name
            config: Logger configuration
            extra: Pre-populated extra fields to include in all log records
            stream: Output stream, defaults to sys.stderr
        """
        existing = logging.root.manager.loggerDict.get(name)
        if isinstance(existing, Logger):
            return existing

        lg = Logger(name, config, extra)
        if config.level is not False:
            lg.setLevel(cast(int, config.level))

        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(LogFormatter(config))
        lg.addHandler(handler)
        lg.propagate = False
        lg.parent = logging.root

        # Register so later create() calls and logging.getLogger() find it
        logging.root.manager.loggerDict[name] = lg

        lg.trace(
            "created logger",
            extra={"level": logging.getLevelName(lg.level), "micros": config.micros},
        )
        return lg

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a child logger that shares the parent's handlers.

        Examples:
            >>> derived = LoggerFactory.derive(root, ["worker", "launch"])
            >>> derived.name
            '/worker/launch'
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name == "/" else parent.name + "/"
        name = prefix + "/".join(tags)

        existing = logging.root.manager.loggerDict.get(name)
        if isinstance(existing, Logger):
            return existing

        lg = Logger(name, parent.config, dict(parent._extra))
        lg.setLevel(parent.level)
        for handler in parent.handlers:
            lg.addHandler(handler)
        lg.parent = parent
        lg.propagate = False
        logging.root.manager.loggerDict[name] = lg
        return lg
