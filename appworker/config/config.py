"""
Loading of the launcher's YAML configuration file.

The file is read once at startup, environment overrides are applied, and the
result is validated against the schemas before anything else sees it.

Environment Variable Override Format:
    APPWORKER_<SECTION>_<KEY>=value

Examples:
    APPWORKER_LAUNCHER_RUNTIME=/opt/R/4.3/bin/R
    APPWORKER_LOGGING_LEVEL=debug
"""

import os
from pathlib import Path
from typing import Any

import pydantic
import yaml  # type: ignore[import-untyped]

from appworker.exceptions import ConfigError

from .constants import DEFAULT_ENV_PREFIX, MAX_CONFIG_SIZE_BYTES
from .schemas import validate_config


def _check_file_size(fname_path: Path) -> None:
    """Check file size limit."""
    file_size = os.path.getsize(fname_path)
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            "configuration file exceeds maximum size",
            path=str(fname_path),
            size=file_size,
            limit=MAX_CONFIG_SIZE_BYTES,
        )


def _read_yaml(fname_path: Path) -> dict[str, Any]:
    try:
        with open(fname_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError("invalid YAML", path=str(fname_path), error=str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("configuration root must be a mapping", path=str(fname_path))
    return data


def convert_env_value(value: str) -> bool | int | float | str | list[Any] | None:
    """
    Convert environment variable string to appropriate type.

    Args:
        value: Environment variable value as string

    Returns:
        None for "null"/"none"/"", bool for "true"/"false", a list for
        comma-separated values, int/float for numbers, else the string
    """
    if value.lower() in ("null", "none", ""):
        return None

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    if "," in value:
        return [convert_env_value(v.strip()) for v in value.split(",")]

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    return value


def _set_nested_value(data: dict[str, Any], path: list[str], value: Any) -> None:
    """Set a nested value, creating intermediate mappings as needed."""
    current = data
    for part in path[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[path[-1]] = value


def get_env_overrides(env_prefix: str = DEFAULT_ENV_PREFIX) -> dict[str, Any]:
    """
    Collect environment overrides with the given prefix.

    Returns:
        Mapping of dotted config path to converted value, e.g.
        {"launcher.runtime": "R4"} for APPWORKER_LAUNCHER_RUNTIME=R4
    """
    overrides = {}
    for key, value in os.environ.items():
        if not key.startswith(env_prefix) or len(key) == len(env_prefix):
            continue
        path = key[len(env_prefix) :].lower().split("_")
        overrides[".".join(path)] = convert_env_value(value)
    return overrides


def apply_env_overrides(
    config_data: dict[str, Any], env_prefix: str = DEFAULT_ENV_PREFIX
) -> dict[str, Any]:
    """Apply environment variable overrides to configuration data in place."""
    for dotted, value in get_env_overrides(env_prefix).items():
        _set_nested_value(config_data, dotted.split("."), value)
    return config_data


def load_config(
    fname: str | os.PathLike[str] | None = None,
    enable_env_overrides: bool = True,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> dict[str, Any]:
    """
    Load, override and validate the configuration.

    Args:
        fname: Path to the YAML configuration file, or None for defaults only
        enable_env_overrides: Whether to apply environment variable overrides
        env_prefix: Prefix for environment variables (default: 'APPWORKER_')

    Returns:
        Validated configuration as a plain dict with "launcher" and "logging"
        sections filled with defaults

    Raises:
        ConfigError: If the file is missing, too large, malformed or invalid
    """
    data: dict[str, Any] = {}
    if fname is not None:
        fname_path = Path(fname).expanduser().resolve()
        if not fname_path.is_file():
            raise ConfigError("configuration file not found", path=str(fname_path))
        _check_file_size(fname_path)
        data = _read_yaml(fname_path)

    if enable_env_overrides:
        data = apply_env_overrides(data, env_prefix)

    try:
        validated = validate_config(data)
    except pydantic.ValidationError as e:
        raise ConfigError("invalid configuration", errors=e.error_count()) from e

    return validated.model_dump()
