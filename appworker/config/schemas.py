"""
Configuration schemas using Pydantic for validation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from appworker.log.constants import LogConstants


class LauncherSchema(BaseModel):
    """Identity switch and runtime used to start the adapter."""

    su: str = Field(default="su", min_length=1, description="Identity-switch binary")
    runtime: str = Field(default="R", min_length=1, description="Application runtime binary")
    flags: list[str] = Field(
        default_factory=lambda: ["--no-save", "--slave"],
        description="Runtime flags placed before '-f <adapter>'",
    )
    adapter: str | None = Field(default=None, description="Adapter script path")

    model_config = ConfigDict(extra="forbid")

    @field_validator("flags", mode="before")
    @classmethod
    def split_flags(cls, v: Any) -> Any:
        """Accept a single flag string as well as a list."""
        if isinstance(v, str):
            return v.split()
        return v


class LoggingSchema(BaseModel):
    """Configuration for logging."""

    level: str | int | bool = Field(default="info", description="Global log level")
    micros: bool = Field(default=False, description="Show microsecond timestamps")
    colors: bool = Field(default=True, description="Colored console output")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: Any) -> Any:
        """Validate log level is a recognized level."""
        if isinstance(v, (bool, int)):
            return v
        if v.isnumeric() or v.lower() in LogConstants.LEVEL_NAMES:
            return v
        raise ValueError(
            f"Invalid log level: {v}. Must be one of {sorted(LogConstants.LEVEL_NAMES)}"
        )


class AppWorkerConfig(BaseModel):
    """Root configuration model."""

    launcher: LauncherSchema = Field(default_factory=LauncherSchema)
    logging: LoggingSchema = Field(default_factory=LoggingSchema)

    model_config = ConfigDict(extra="allow")


def validate_config(config_dict: dict[str, Any]) -> AppWorkerConfig:
    """
    Validate a configuration dictionary.

    Raises:
        pydantic.ValidationError: If the configuration does not match the schema
    """
    return AppWorkerConfig.model_validate(config_dict)
