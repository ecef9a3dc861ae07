"""Launch parameters and exit results."""

from __future__ import annotations

import signal
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

# Settings key holding the analytics tracking id passed to the adapter
TRACKING_ID_KEY = "ga_tracking_id"


@dataclass(frozen=True)
class LaunchSpec:
    """
    Parameters for one application launch.

    Attributes:
        run_as: OS user the application runs as
        app_dir: Application directory; must exist when launching
        settings: Optional string settings; missing keys read as ""
    """

    run_as: str | None
    app_dir: str | None
    # Mapping proxies are unhashable; specs hash on identity fields only
    settings: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Detach from the caller's mapping so later mutation cannot leak in
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings or {})))

    def setting(self, key: str) -> str:
        """Return a setting as a string, "" when unset or None."""
        value = self.settings.get(key)
        return "" if value is None else str(value)

    @property
    def tracking_id(self) -> str:
        return self.setting(TRACKING_ID_KEY)


def encode_payload(spec: LaunchSpec, listen_port: int) -> bytes:
    """
    Encode the startup payload written to the adapter's stdin.

    Three newline-terminated lines: app directory, listen port, tracking id.
    Passing them over stdin keeps them out of ``ps`` output for other users.
    """
    lines = [str(spec.app_dir), str(listen_port), spec.tracking_id]
    return "".join(f"{line}\n" for line in lines).encode("utf-8")


def signal_name(signum: int) -> str:
    """Return the symbolic name of a signal number, e.g. 15 -> "SIGTERM"."""
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"SIG{signum}"


@dataclass(frozen=True)
class ExitResult:
    """
    How a worker process terminated.

    Exactly one of ``code`` and ``signal`` is set: ``code`` for a normal exit,
    ``signal`` (e.g. "SIGTERM") when the process was killed by a signal.
    """

    code: int | None = None
    signal: str | None = None

    def __post_init__(self) -> None:
        if (self.code is None) == (self.signal is None):
            raise ValueError(
                f"exactly one of code and signal must be set "
                f"(code={self.code!r}, signal={self.signal!r})"
            )

    @classmethod
    def from_returncode(cls, returncode: int) -> ExitResult:
        """
        Build from a ``subprocess`` return code.

        Negative return codes mean the process was terminated by signal ``-rc``.
        """
        if returncode < 0:
            return cls(code=None, signal=signal_name(-returncode))
        return cls(code=returncode, signal=None)

    @property
    def signaled(self) -> bool:
        return self.signal is not None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "signal": self.signal}
