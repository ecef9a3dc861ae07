"""
Tests for the appworker CLI.
"""

import json
import os

import pytest

from appworker.cli import BufferedOutput
from appworker.cli.cli import (
    EXIT_ERROR,
    EXIT_NOT_FOUND,
    EXIT_VALIDATION,
    build_parser,
    exit_status,
    format_result,
    main,
)
from appworker.worker import ExitResult


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("APPWORKER_"):
            monkeypatch.delenv(key)


@pytest.fixture
def config_file(temp_dir, fake_su_config):
    """Write a config file pointing the launcher at a fake su."""

    def factory(adapter_body: str):
        launcher = fake_su_config(adapter_body)
        path = temp_dir / "appworker.yaml"
        path.write_text(
            "launcher:\n"
            f"  su: {launcher.su_path}\n"
            f"  runtime: {launcher.runtime}\n"
            "  flags: []\n"
            f"  adapter: {launcher.adapter_script}\n"
            "logging:\n"
            "  level: debug\n"
            "  colors: false\n"
        )
        return path

    return factory


def _run_args(app_dir, log_file, *extra):
    return [
        "run",
        "--user",
        "alice",
        "--app-dir",
        str(app_dir),
        "--port",
        "3838",
        "--log-file",
        str(log_file),
        *extra,
    ]


@pytest.mark.unit
class TestHelpers:
    def test_exit_status_code(self):
        assert exit_status(ExitResult(code=4)) == 4

    def test_exit_status_signal(self):
        assert exit_status(ExitResult(signal="SIGTERM")) == 143

    def test_exit_status_unnamed_signal(self):
        assert exit_status(ExitResult(signal="SIG40")) == 168

    def test_format_result(self):
        assert format_result(ExitResult(code=0)) == "exited code=0"
        assert format_result(ExitResult(signal="SIGKILL")) == "killed signal=SIGKILL"
        assert json.loads(format_result(ExitResult(code=1), as_json=True)) == {
            "code": 1,
            "signal": None,
        }

    def test_parser_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


@pytest.mark.unit
class TestRunErrors:
    def test_not_found(self, temp_dir):
        out = BufferedOutput()

        status = main(["-q", *_run_args(temp_dir / "missing", temp_dir / "app.log")], out=out)

        assert status == EXIT_NOT_FOUND
        assert "App directory does not exist" in out.text
        assert not (temp_dir / "app.log").exists()

    def test_invalid_port(self, app_dir, temp_dir):
        out = BufferedOutput()
        args = _run_args(app_dir, temp_dir / "app.log")
        args[args.index("3838")] = "0"

        assert main(["-q", *args], out=out) == EXIT_VALIDATION
        assert "Invalid listen port" in out.text

    def test_unknown_kill_signal(self, app_dir, temp_dir):
        out = BufferedOutput()
        args = _run_args(app_dir, temp_dir / "app.log", "--kill-signal", "SIGNOPE")

        assert main(["-q", *args], out=out) == EXIT_VALIDATION
        assert not (temp_dir / "app.log").exists()

    def test_missing_config_file(self, app_dir, temp_dir):
        out = BufferedOutput()
        args = ["-c", str(temp_dir / "nope.yaml"), *_run_args(app_dir, temp_dir / "app.log")]

        assert main(args, out=out) == EXIT_ERROR
        assert "configuration file not found" in out.text

    def test_spawn_failure(self, app_dir, temp_dir, monkeypatch):
        monkeypatch.setenv("APPWORKER_LAUNCHER_SU", str(temp_dir / "no-such-su"))
        out = BufferedOutput()

        assert main(["-q", *_run_args(app_dir, temp_dir / "app.log")], out=out) == EXIT_ERROR
        assert "failed to spawn worker" in out.text


@pytest.mark.integration
class TestRunProcess:
    """Run real processes through a fake su."""

    def test_reports_exit_code(self, app_dir, temp_dir, config_file):
        path = config_file("read dir; read port; read tid\necho \"$dir $port\" >&2\nexit 7\n")
        out = BufferedOutput()
        log_file = temp_dir / "app.log"

        status = main(["-c", str(path), *_run_args(app_dir, log_file)], out=out)

        assert status == 7
        assert out.lines == ["exited code=7"]
        assert log_file.read_text() == f"{app_dir} 3838\n"

    def test_json_output(self, app_dir, temp_dir, config_file):
        path = config_file("exit 0\n")
        out = BufferedOutput()

        status = main(["-c", str(path), *_run_args(app_dir, temp_dir / "app.log", "--json")], out=out)

        assert status == 0
        assert json.loads(out.lines[0]) == {"code": 0, "signal": None}

    def test_tracking_id_passed(self, app_dir, temp_dir, config_file):
        path = config_file("cat >&2\n")
        log_file = temp_dir / "app.log"

        main(
            ["-c", str(path), *_run_args(app_dir, log_file, "--tracking-id", "UA-7")],
            out=BufferedOutput(),
        )

        assert log_file.read_text() == f"{app_dir}\n3838\nUA-7\n"

    def test_timeout_kills(self, app_dir, temp_dir, config_file):
        path = config_file("exec sleep 30\n")
        out = BufferedOutput()

        status = main(
            ["-c", str(path), *_run_args(app_dir, temp_dir / "app.log", "--timeout", "0.3")],
            out=out,
        )

        assert status == 143
        assert out.lines == ["killed signal=SIGTERM"]
