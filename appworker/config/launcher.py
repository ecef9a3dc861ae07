"""Immutable launcher settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .constants import DEFAULT_ADAPTER_SCRIPT


@dataclass(frozen=True)
class LauncherConfig:
    """
    How a worker process is started.

    Resolved once at process start and passed explicitly to launch() and
    Worker; nothing in the launch path reads the environment.

    Attributes:
        su_path: Identity-switch binary invoked as ``su -- <user> -c <command>``
        runtime: Application runtime executed by the target user (default: "R")
        runtime_flags: Flags placed before ``-f <adapter_script>``. The
            defaults make R non-interactive, skip saving the workspace and
            silence the banner.
        adapter_script: Script bridging the application to its listen port
    """

    su_path: str = "su"
    runtime: str = "R"
    runtime_flags: tuple[str, ...] = ("--no-save", "--slave")
    adapter_script: Path = DEFAULT_ADAPTER_SCRIPT

    @classmethod
    def from_config(cls, config_dict: dict[str, Any], section: str = "launcher") -> LauncherConfig:
        """
        Create LauncherConfig from a configuration dictionary.

        Args:
            config_dict: Configuration dictionary (e.g., from load_config)
            section: Section holding the launcher keys (default: "launcher")
        """
        current = config_dict.get(section) or {}
        defaults = cls()
        adapter = current.get("adapter")
        return cls(
            su_path=current.get("su") or defaults.su_path,
            runtime=current.get("runtime") or defaults.runtime,
            runtime_flags=tuple(current.get("flags", defaults.runtime_flags)),
            adapter_script=Path(adapter) if adapter else defaults.adapter_script,
        )
