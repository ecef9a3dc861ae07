"""
Configuration-related constants and resource limits.
"""

from pathlib import Path

# Maximum config file size (1MB)
MAX_CONFIG_SIZE_BYTES = 1024 * 1024

DEFAULT_ENV_PREFIX = "APPWORKER_"

# Adapter script shipped alongside the package
DEFAULT_ADAPTER_SCRIPT = Path(__file__).resolve().parent.parent / "adapter" / "SockJSAdapter.R"
