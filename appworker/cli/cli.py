#!/usr/bin/env python3
"""
appworker CLI - run one application under another user and report its exit.

Usage:
    appworker run --user alice --app-dir /srv/app --port 3838 --log-file /var/log/app.log
    appworker run ... --timeout 600 --kill-signal SIGKILL
    appworker --help
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import signal

from appworker import __version__
from appworker.config import LauncherConfig, load_config
from appworker.exceptions import ConfigError, NotFoundError, ValidationError, WorkerError
from appworker.log import LogConfig, LoggerFactory
from appworker.worker import TRACKING_ID_KEY, ExitResult, LaunchSpec, launch, resolve_signal

from .output import ConsoleOutput, OutputWriter

EXIT_ERROR = 1
EXIT_VALIDATION = 2
EXIT_NOT_FOUND = 3


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="appworker",
        description="Launch an application as another user and wait for it to exit",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"appworker {__version__}")
    parser.add_argument("-c", "--config", help="YAML configuration file")
    parser.add_argument(
        "-l", "--log-level", help="supervisor log level (overrides config)"
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="disable supervisor logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    run = subparsers.add_parser(
        "run",
        help="run an application until it exits",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    run.add_argument("-u", "--user", required=True, help="user to run the application as")
    run.add_argument("-d", "--app-dir", required=True, help="application directory")
    run.add_argument("-p", "--port", required=True, type=int, help="port the application listens on")
    run.add_argument("-o", "--log-file", required=True, help="file the application's stderr is appended to")
    run.add_argument("--tracking-id", help="analytics tracking id passed to the adapter")
    run.add_argument("-t", "--timeout", type=float, help="seconds to wait before signalling the application")
    run.add_argument("-k", "--kill-signal", default="SIGTERM", help="signal sent on timeout")
    run.add_argument("--json", action="store_true", help="print the exit result as JSON")
    return parser


def exit_status(result: ExitResult) -> int:
    """Map an exit result to a shell exit status (128 + signum for signals)."""
    if result.code is not None:
        return result.code
    signame = str(result.signal)
    try:
        signum = int(resolve_signal(signame))
    except ValidationError:
        # Unnamed signals are reported as "SIG<n>"
        signum = int(signame.removeprefix("SIG"))
    return 128 + signum


def format_result(result: ExitResult, as_json: bool = False) -> str:
    if as_json:
        return json.dumps(result.to_dict())
    if result.signaled:
        return f"killed signal={result.signal}"
    return f"exited code={result.code}"


async def run_with_timeout(
    spec: LaunchSpec,
    listen_port: int,
    log_file: str,
    config: LauncherConfig,
    lg: logging.Logger,
    timeout: float | None = None,
    kill_signal: str | int | signal.Signals = signal.SIGTERM,
) -> ExitResult:
    """
    Launch a worker and wait for it, signalling it if it outlives the timeout.

    After the signal, keeps waiting for the real exit notification.
    """
    worker = await launch(spec, listen_port, log_file, config=config, lg=lg)
    if timeout is None:
        return await worker.exit()

    try:
        return await asyncio.wait_for(worker.exit(), timeout)
    except TimeoutError:
        lg.warning(
            "worker timed out, sending signal",
            extra={"pid": worker.pid, "timeout": timeout, "sig": str(kill_signal)},
        )
        worker.kill(kill_signal)
        return await worker.exit()


def _create_logger(config: dict, args: argparse.Namespace) -> logging.Logger:
    log_config = LogConfig.from_config(config)
    if args.quiet:
        log_config = dataclasses.replace(log_config, level=False)
    elif args.log_level:
        log_config = dataclasses.replace(
            log_config, level=LogConfig.from_params(args.log_level).level
        )
    return LoggerFactory.create_root(log_config)


def _run(args: argparse.Namespace, out: OutputWriter) -> int:
    try:
        config = load_config(args.config)
    except ConfigError as e:
        out.write(f"error: {e}")
        return EXIT_ERROR

    lg = _create_logger(config, args)
    launcher_config = LauncherConfig.from_config(config)
    settings = {TRACKING_ID_KEY: args.tracking_id} if args.tracking_id else {}
    spec = LaunchSpec(run_as=args.user, app_dir=args.app_dir, settings=settings)

    try:
        kill_signal = resolve_signal(args.kill_signal)
        result = asyncio.run(
            run_with_timeout(
                spec,
                args.port,
                args.log_file,
                launcher_config,
                lg,
                timeout=args.timeout,
                kill_signal=kill_signal,
            )
        )
    except ValidationError as e:
        out.write(f"error: {e}")
        return EXIT_VALIDATION
    except NotFoundError as e:
        out.write(f"error: {e}")
        return EXIT_NOT_FOUND
    except WorkerError as e:
        out.write(f"error: {e}")
        return EXIT_ERROR

    out.write(format_result(result, as_json=args.json))
    return exit_status(result)


def main(argv: list[str] | None = None, out: OutputWriter | None = None) -> int:
    """Main entry point for the appworker CLI."""
    args = build_parser().parse_args(argv)
    out = out or ConsoleOutput()
    if args.command == "run":
        return _run(args, out)
    return EXIT_ERROR


if __name__ == "__main__":
    exit(main())
