"""
Exception hierarchy for the application worker.

Every failure surfaced by the launcher derives from WorkerError, so callers can
catch the whole family with a single except clause and still tell the kinds
apart (bad input, missing app, unusable log file, failed spawn).
"""

from typing import Any


class WorkerError(Exception):
    """
    Base exception for all worker errors.

    Example:
        try:
            worker = await launch(spec, 3838, "/var/log/app.log")
        except WorkerError as e:
            lg.error(f"launch failed: {e}")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ValidationError(WorkerError):
    """
    A required launch parameter is missing or invalid.

    Raised before any filesystem access or process creation.

    Examples:
        - No user to run the app as
        - No application directory
        - Listen port outside 1..65535
    """

    pass


class NotFoundError(WorkerError):
    """
    The application directory does not exist.

    Carries ``code == "ENOTFOUND"`` so front ends can map it to a 404-style
    response without matching on the exception type.
    """

    code = "ENOTFOUND"


class LogTargetError(WorkerError):
    """The stderr log file could not be opened for append."""

    pass


class SpawnError(WorkerError):
    """
    The child process could not be created.

    Never raised from launch(); it rejects the worker's exit notification.

    Examples:
        - su binary missing
        - Permission denied switching identity
    """

    pass


class ConfigError(WorkerError):
    """
    Launcher configuration errors.

    Examples:
        - Config file not found or too large
        - Invalid YAML syntax
        - Value failing schema validation
    """

    pass
