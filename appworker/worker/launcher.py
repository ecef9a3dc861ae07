"""
Launch coordination for application workers.

launch() validates the request, confirms the application directory exists,
opens the stderr log for append and hands everything to a new Worker. The log
file is closed once the worker's exit notification settles.
"""

from __future__ import annotations

import asyncio
import logging
import os
from functools import partial
from typing import IO, Any

from appworker.config import LauncherConfig
from appworker.exceptions import LogTargetError, NotFoundError, ValidationError

from .spec import TRACKING_ID_KEY, ExitResult, LaunchSpec
from .worker import Worker

logger = logging.getLogger("appworker.launcher")


def _has_line_break(value: object) -> bool:
    text = str(value)
    return "\n" in text or "\r" in text


def validate_launch(spec: LaunchSpec, listen_port: int) -> None:
    """
    Check launch parameters without touching the filesystem.

    Raises:
        ValidationError: If the user or app directory is missing, the app
            directory or tracking id spans more than one line, or the port is
            not an integer in 1..65535
    """
    if not spec.run_as:
        raise ValidationError("No user specified", field="run_as")
    if not spec.app_dir:
        raise ValidationError("No app directory specified", field="app_dir")
    # Each payload field must stay on its own stdin line
    if _has_line_break(spec.app_dir):
        raise ValidationError("App directory contains a line break", field="app_dir")
    if _has_line_break(spec.tracking_id):
        raise ValidationError("Tracking id contains a line break", field=TRACKING_ID_KEY)
    if (
        isinstance(listen_port, bool)
        or not isinstance(listen_port, int)
        or not 0 < listen_port < 65536
    ):
        raise ValidationError("Invalid listen port", field="listen_port", value=listen_port)


def _open_log(log_path: str | os.PathLike[str]) -> IO[bytes]:
    return open(log_path, "ab")


def _close_log(
    log_target: IO[Any], lg: logging.Logger, exit_future: asyncio.Future[ExitResult]
) -> None:
    """Close the log target once the exit notification has settled."""
    log_target.close()
    # Marks a spawn failure as retrieved when nobody awaits the worker
    if not exit_future.cancelled():
        exit_future.exception()
    lg.debug("closed worker log", extra={"log_file": getattr(log_target, "name", None)})


async def launch(
    spec: LaunchSpec,
    listen_port: int,
    log_path: str | os.PathLike[str],
    config: LauncherConfig | None = None,
    lg: logging.Logger | None = None,
) -> Worker:
    """
    Start a worker for the given application.

    Returns once the worker is constructed, not once the process exits; await
    ``worker.exit()`` for that.

    Args:
        spec: Launch parameters
        listen_port: Port the application must bind
        log_path: File the process's stderr is appended to (created if absent)
        config: Launcher settings (default: LauncherConfig())
        lg: Logger (default: the "appworker.launcher" logger)

    Raises:
        ValidationError: Missing user or app directory, or invalid port.
            Nothing is opened or spawned.
        NotFoundError: The app directory does not exist (``code == "ENOTFOUND"``).
            The log file is not opened.
        LogTargetError: The log file could not be opened. Nothing is spawned.
    """
    lg = lg or logger
    validate_launch(spec, listen_port)

    if not await asyncio.to_thread(os.path.exists, spec.app_dir):
        lg.debug("app directory missing", extra={"app_dir": spec.app_dir})
        raise NotFoundError("App directory does not exist", app_dir=spec.app_dir)

    try:
        log_target = await asyncio.to_thread(_open_log, log_path)
    except OSError as e:
        raise LogTargetError(
            "failed to open log file", log_file=os.fspath(log_path), error=str(e)
        ) from e
    lg.debug("opened worker log", extra={"log_file": os.fspath(log_path)})

    try:
        worker = Worker(spec, listen_port, log_target, config=config, lg=lg)
    except BaseException:
        log_target.close()
        raise

    worker.add_exit_callback(partial(_close_log, log_target, lg))
    return worker


async def run(
    spec: LaunchSpec,
    listen_port: int,
    log_path: str | os.PathLike[str],
    config: LauncherConfig | None = None,
    lg: logging.Logger | None = None,
) -> ExitResult:
    """Launch a worker and wait for it to exit."""
    worker = await launch(spec, listen_port, log_path, config=config, lg=lg)
    return await worker.exit()
