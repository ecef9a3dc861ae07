"""
appworker - launch a user-owned application under another identity.

Starts exactly one child process per launch through su, passes its startup
parameters over stdin, appends its stderr to a log file, and reports its exit
code or terminating signal through a one-shot asyncio future.

Example:
    spec = LaunchSpec(run_as="alice", app_dir="/srv/app")
    worker = await launch(spec, 3838, "/var/log/app.log")
    result = await worker.exit()
"""

from importlib.metadata import PackageNotFoundError, version

from .config import LauncherConfig, load_config
from .exceptions import (
    ConfigError,
    LogTargetError,
    NotFoundError,
    SpawnError,
    ValidationError,
    WorkerError,
)
from .worker import ExitResult, LaunchSpec, Worker, WorkerState, launch, run

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("appworker")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    "LaunchSpec",
    "ExitResult",
    "Worker",
    "WorkerState",
    "LauncherConfig",
    "launch",
    "run",
    "load_config",
    "WorkerError",
    "ValidationError",
    "NotFoundError",
    "LogTargetError",
    "SpawnError",
    "ConfigError",
]
