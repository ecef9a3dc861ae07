"""
Pytest configuration and shared fixtures.

This module provides central pytest configuration, custom markers,
and shared fixtures for the appworker test suite.
"""

import logging
import shutil
import stat
import tempfile
import threading
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from appworker.config import LauncherConfig

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (spawn real processes)"
    )
    config.addinivalue_line("markers", "property: Property-based tests (hypothesis)")
    config.addinivalue_line(
        "markers", "asyncio: Mark test as an async test (requires async runner)"
    )


def pytest_collection_modifyitems(config, items):
    """Add 'unit' marker to tests without other markers."""
    for item in items:
        if not any(mark.name in ["integration"] for mark in item.iter_markers()):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Provide a temporary directory that is cleaned up after the test.

    Yields:
        Path: Temporary directory path
    """
    temp_path = Path(tempfile.mkdtemp(prefix="appworker-test-"))
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def app_dir(temp_dir: Path) -> Path:
    """An existing application directory."""
    path = temp_dir / "app"
    path.mkdir()
    return path


@pytest.fixture
def log_path(temp_dir: Path) -> Path:
    """Path of a worker log file that does not exist yet."""
    return temp_dir / "logs" / "app.log"


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Remove loggers created by the factory during a test."""
    yield
    for name in list(logging.root.manager.loggerDict.keys()):
        if name.startswith("/") or name.startswith("test"):
            del logging.root.manager.loggerDict[name]


# =============================================================================
# Process Fixtures
# =============================================================================


class FakeProcess:
    """
    Stand-in for subprocess.Popen.

    wait() blocks until finish() or send_signal() is called, like a real
    child that keeps running until it exits or is signalled.
    """

    def __init__(self, pid: int = 4242) -> None:
        self.pid = pid
        self.stdin = MagicMock()
        self.returncode: int | None = None
        self.signals: list[int] = []
        self._done = threading.Event()
        self._rc = 0

    def finish(self, returncode: int) -> None:
        self._rc = returncode
        self._done.set()

    def send_signal(self, sig: int) -> None:
        self.signals.append(int(sig))
        if not self._done.is_set():
            self.finish(-int(sig))

    def wait(self) -> int:
        self._done.wait(timeout=10)
        self.returncode = self._rc
        return self._rc


@pytest.fixture
def fake_process() -> FakeProcess:
    return FakeProcess()


@pytest.fixture
def popen_mock(fake_process: FakeProcess, monkeypatch) -> MagicMock:
    """Patch Popen in the worker module to return the fake process."""
    mock = MagicMock(return_value=fake_process)
    monkeypatch.setattr("appworker.worker.worker.subprocess.Popen", mock)
    yield mock
    # Never leave a monitor thread blocked past the test
    fake_process.finish(0)


def _write_script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_su_config(temp_dir: Path) -> Callable[[str], LauncherConfig]:
    """
    Build a LauncherConfig whose su ignores the user and runs the command.

    The returned factory takes the adapter script body; the adapter runs under
    /bin/sh the same way the real runtime runs its script (``<runtime> -f <script>``).
    """

    def factory(adapter_body: str) -> LauncherConfig:
        # argv: -- <user> -c <command>
        su = _write_script(temp_dir / "fake-su", 'exec /bin/sh -c "$4"\n')
        adapter = _write_script(temp_dir / "adapter.sh", adapter_body)
        return LauncherConfig(
            su_path=str(su),
            runtime="/bin/sh",
            runtime_flags=(),
            adapter_script=adapter,
        )

    return factory
