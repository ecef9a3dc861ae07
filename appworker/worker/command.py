"""Identity-switching command line for the adapter process."""

import shlex

from appworker.config import LauncherConfig


def runtime_command(config: LauncherConfig) -> str:
    """
    Build the command string the target user's shell runs.

    ``su -c`` needs a single string, so this is the one place a shell hop
    happens; every element is quoted and no launch parameter appears in it.
    """
    parts = [config.runtime, *config.runtime_flags, "-f", str(config.adapter_script)]
    return " ".join(shlex.quote(part) for part in parts)


def build_command(run_as: str, config: LauncherConfig) -> list[str]:
    """
    Build the argv that starts the adapter as ``run_as``.

    Going through su makes the OS perform setgid, initgroups and setuid for
    the target user.

    Example:
        >>> build_command("alice", LauncherConfig(adapter_script=Path("/opt/a.R")))
        ['su', '--', 'alice', '-c', 'R --no-save --slave -f /opt/a.R']
    """
    return [config.su_path, "--", run_as, "-c", runtime_command(config)]
