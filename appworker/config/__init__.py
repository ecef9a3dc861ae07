"""
Configuration for the application worker.

Provides the immutable LauncherConfig and YAML loading with environment
variable overrides and schema validation.
"""

from .config import apply_env_overrides, convert_env_value, get_env_overrides, load_config
from .constants import DEFAULT_ADAPTER_SCRIPT, DEFAULT_ENV_PREFIX, MAX_CONFIG_SIZE_BYTES
from .launcher import LauncherConfig
from .schemas import AppWorkerConfig, LauncherSchema, LoggingSchema, validate_config

__all__ = [
    "LauncherConfig",
    "load_config",
    "apply_env_overrides",
    "convert_env_value",
    "get_env_overrides",
    "validate_config",
    "AppWorkerConfig",
    "LauncherSchema",
    "LoggingSchema",
    "DEFAULT_ADAPTER_SCRIPT",
    "DEFAULT_ENV_PREFIX",
    "MAX_CONFIG_SIZE_BYTES",
]
