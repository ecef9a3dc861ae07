"""
Tests for the worker exception hierarchy.
"""

import pytest

from appworker.exceptions import (
    ConfigError,
    LogTargetError,
    NotFoundError,
    SpawnError,
    ValidationError,
    WorkerError,
)


@pytest.mark.unit
class TestWorkerError:
    """Test WorkerError base class."""

    def test_with_message(self):
        error = WorkerError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.context == {}

    def test_str_with_context(self):
        error = WorkerError("Test error", user="alice", port=3838)
        assert str(error) == "Test error (user=alice, port=3838)"
        assert error.context == {"user": "alice", "port": 3838}


@pytest.mark.unit
class TestHierarchy:
    """Test every error kind derives from WorkerError."""

    @pytest.mark.parametrize(
        "cls", [ValidationError, NotFoundError, LogTargetError, SpawnError, ConfigError]
    )
    def test_inherits_worker_error(self, cls):
        with pytest.raises(WorkerError):
            raise cls("failure")

    def test_not_found_marker(self):
        error = NotFoundError("App directory does not exist", app_dir="/srv/app")
        assert error.code == "ENOTFOUND"
        assert not isinstance(error, ValidationError)
