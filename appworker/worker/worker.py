"""
Worker supervising a single application process.

A Worker:
- Spawns the adapter under the target user's identity via su
- Hands the startup parameters over stdin, never argv
- Sends the process's stderr to the caller's log file
- Publishes one exit notification once the OS reports the process is gone
"""

from __future__ import annotations

import asyncio
import enum
import logging
import signal
import subprocess
import threading
from collections.abc import Callable
from typing import IO, Any

from appworker.config import LauncherConfig
from appworker.exceptions import SpawnError, ValidationError

from .command import build_command
from .spec import ExitResult, LaunchSpec, encode_payload

logger = logging.getLogger("appworker.worker")


class WorkerState(enum.Enum):
    """Worker lifecycle state."""

    SPAWNING = "spawning"
    RUNNING = "running"
    EXITED = "exited"
    SPAWN_FAILED = "spawn_failed"


def resolve_signal(sig: int | str | signal.Signals) -> signal.Signals:
    """
    Resolve a signal given as number, enum member or name.

    Accepts "SIGKILL", "KILL" and "kill" alike.

    Raises:
        ValidationError: If the signal is unknown
    """
    if isinstance(sig, signal.Signals):
        return sig
    try:
        if isinstance(sig, str):
            name = sig.upper()
            if not name.startswith("SIG"):
                name = "SIG" + name
            return signal.Signals[name]
        return signal.Signals(sig)
    except (KeyError, ValueError) as e:
        raise ValidationError("unknown signal", field="signal", value=sig) from e


class Worker:
    """
    Supervises one child process from spawn to exit.

    Must be constructed while an asyncio event loop is running; the exit
    notification is a future bound to that loop.

    State machine: SPAWNING -> RUNNING -> EXITED, or SPAWNING -> SPAWN_FAILED.
    A worker is single use.

    Example:
        worker = Worker(spec, 3838, log_file)
        ...
        worker.kill("SIGTERM")
        result = await worker.exit()  # ExitResult(code=None, signal="SIGTERM")
    """

    def __init__(
        self,
        spec: LaunchSpec,
        listen_port: int,
        log_target: IO[Any],
        config: LauncherConfig | None = None,
        lg: logging.Logger | None = None,
    ) -> None:
        """
        Spawn the process immediately.

        Spawn failures do not raise; they reject the exit notification with
        SpawnError.

        Args:
            spec: Launch parameters
            listen_port: Port the application must bind
            log_target: Open file receiving the process's stderr
            config: Launcher settings (default: LauncherConfig())
            lg: Logger (default: the "appworker.worker" logger)
        """
        self._spec = spec
        self._listen_port = listen_port
        self._config = config or LauncherConfig()
        self._lg = lg or logger

        self._loop = asyncio.get_running_loop()
        self._exit: asyncio.Future[ExitResult] = self._loop.create_future()
        self._exit_view: asyncio.Future[ExitResult] | None = None
        self._proc: subprocess.Popen[bytes] | None = None
        self._monitor_thread: threading.Thread | None = None
        self._state = WorkerState.SPAWNING

        try:
            self._proc = self._spawn(log_target)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            self._fail_spawn(e)
            return

        self._state = WorkerState.RUNNING
        self._lg.info(
            "worker spawned",
            extra={"pid": self._proc.pid, "user": spec.run_as, "port": listen_port},
        )

        self._write_payload()
        self._start_monitor()

    @property
    def spec(self) -> LaunchSpec:
        return self._spec

    @property
    def listen_port(self) -> int:
        return self._listen_port

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def pid(self) -> int | None:
        """Process ID, None if the process was never spawned."""
        return self._proc.pid if self._proc else None

    def exit(self) -> asyncio.Future[ExitResult]:
        """
        Future resolved with the ExitResult once the process has exited.

        Returns the same shielded view of the exit notification on every call,
        so cancelling it (e.g. through asyncio.wait_for) never cancels the
        notification itself. A cancelled view is replaced on the next call.
        Rejected with SpawnError if the process could not be started.
        """
        if self._exit_view is None or self._exit_view.cancelled():
            self._exit_view = asyncio.shield(self._exit)
        return self._exit_view

    def add_exit_callback(self, callback: Callable[[asyncio.Future[ExitResult]], Any]) -> None:
        """Run ``callback(future)`` on the loop once the exit notification settles."""
        self._exit.add_done_callback(callback)

    def kill(self, sig: int | str | signal.Signals = signal.SIGTERM) -> None:
        """
        Send a signal to the process.

        Fire-and-forget: the exit notification still resolves only when the
        OS reports the process has exited. Does nothing if the process was
        never spawned or has already been reaped.

        Raises:
            ValidationError: If the signal is unknown
        """
        signum = resolve_signal(sig)
        if self._proc is None:
            self._lg.debug("kill ignored, worker never spawned", extra={"sig": signum.name})
            return

        self._lg.debug("sending signal", extra={"pid": self._proc.pid, "sig": signum.name})
        # send_signal is a no-op once the process has been reaped
        self._proc.send_signal(signum)

    def _spawn(self, log_target: IO[Any]) -> subprocess.Popen[bytes]:
        argv = build_command(str(self._spec.run_as), self._config)
        return subprocess.Popen(
            argv,
            stdin=subprocess.PIPE,
            stdout=subprocess.DEVNULL,
            stderr=log_target,
        )

    def _fail_spawn(self, e: BaseException) -> None:
        self._state = WorkerState.SPAWN_FAILED
        self._lg.error(
            "failed to spawn worker",
            extra={"user": self._spec.run_as, "su": self._config.su_path, "error": str(e)},
        )
        error = SpawnError("failed to spawn worker", user=self._spec.run_as, error=str(e))
        error.__cause__ = e
        self._exit.set_exception(error)

    def _write_payload(self) -> None:
        """
        Write the startup payload and close stdin.

        A write failure (e.g. the child exited before reading) is logged and
        not surfaced; the exit notification reports what happened to the child.
        """
        assert self._proc is not None and self._proc.stdin is not None
        stdin = self._proc.stdin
        try:
            stdin.write(encode_payload(self._spec, self._listen_port))
            stdin.flush()
        except OSError as e:
            self._lg.warning(
                "failed to write startup payload",
                extra={"pid": self._proc.pid, "error": str(e)},
            )
        finally:
            try:
                stdin.close()
            except OSError as e:
                self._lg.debug("stdin close failed", extra={"pid": self._proc.pid, "error": str(e)})

    def _start_monitor(self) -> None:
        assert self._proc is not None
        self._monitor_thread = threading.Thread(
            target=self._monitor_exit,
            daemon=True,
            name=f"worker-monitor-{self._proc.pid}",
        )
        self._monitor_thread.start()

    def _monitor_exit(self) -> None:
        """Block until the OS reports the process has exited, then notify the loop."""
        assert self._proc is not None
        returncode = self._proc.wait()
        try:
            self._loop.call_soon_threadsafe(self._resolve_exit, returncode)
        except RuntimeError:
            # Event loop already closed; nobody is left to notify
            self._lg.debug("event loop closed before worker exit", extra={"pid": self._proc.pid})

    def _resolve_exit(self, returncode: int) -> None:
        result = ExitResult.from_returncode(returncode)
        self._state = WorkerState.EXITED
        self._lg.info(
            "worker exited",
            extra={"pid": self.pid, "code": result.code, "signal": result.signal},
        )
        self._exit.set_result(result)
