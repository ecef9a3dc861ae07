"""
Application worker: launch one user-owned process and observe its exit.
"""

from .command import build_command, runtime_command
from .launcher import launch, run, validate_launch
from .spec import TRACKING_ID_KEY, ExitResult, LaunchSpec, encode_payload, signal_name
from .worker import Worker, WorkerState, resolve_signal

__all__ = [
    "LaunchSpec",
    "ExitResult",
    "Worker",
    "WorkerState",
    "TRACKING_ID_KEY",
    "launch",
    "run",
    "validate_launch",
    "build_command",
    "runtime_command",
    "encode_payload",
    "resolve_signal",
    "signal_name",
]
