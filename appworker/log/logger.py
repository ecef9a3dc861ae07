"""
Logger class with structured extra fields.

Extends the standard Python logger so every record carries its ``extra``
mapping as a single attribute, which the formatter renders as
``[key:value]`` fields after the message.
"""

import logging
from typing import Any

from .config import LogConfig
from .constants import LogConstants


class Logger(logging.Logger):
    """
    Logger with pre-populated extra fields, a TRACE level and a hard-off switch.

    Example:
        lg = LoggerFactory.create_root(LogConfig.from_params("debug"))
        lg.info("worker spawned", extra={"pid": 4242, "user": "alice"})
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | None = None,
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name
            config: Logger configuration, default LogConfig if None
            extra: Extra fields included in every record from this logger
        """
        if config is None:
            config = LogConfig()

        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self._logging_disabled = True
        else:
            super().__init__(name, config.level)
            self._logging_disabled = False

        self._config = config
        self._extra = dict(extra or {})

    @property
    def config(self) -> LogConfig:
        """Get logger configuration."""
        return self._config

    @property
    def disabled(self) -> bool:
        """Check if logging is disabled."""
        return self._logging_disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        self._logging_disabled = value

    def makeRecord(  # type: ignore[override]
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: str,
        args: tuple,
        exc_info: Any | None,
        func: str | None = None,
        extra: dict[str, Any] | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        """Create log record, merging the logger's extra fields with the call's."""
        merged = self._extra.copy()
        if extra:
            merged.update(extra)
        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func=func, extra=merged, sinfo=sinfo
        )
        # setattr avoids name mangling of the double underscore prefix
        setattr(record, "__appworker__extra", merged)
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a TRACE level message."""
        level = LogConstants.CUSTOM_LEVELS["TRACE"]
        if self.isEnabledFor(level):
            self._log(level, msg, args, **kwargs)

    def isEnabledFor(self, level: int) -> bool:
        if self._logging_disabled:
            return False
        return super().isEnabledFor(level)

    def bind(self, **extra: Any) -> "Logger":
        """
        Return a sibling logger sharing handlers but carrying additional extra fields.

        Used to tag all records of one worker with its pid and user.
        """
        merged = self._extra.copy()
        merged.update(extra)
        lg = self.__class__(self.name, self._config, merged)
        lg.setLevel(self.level)
        lg.parent = self
        lg.propagate = False
        for handler in self.handlers:
            lg.addHandler(handler)
        return lg
