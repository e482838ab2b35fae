"""
Configuration Schema and Models

Defines Pydantic models for the configuration schema, providing validation,
default values, and type checking for all configuration options.

Author: Cronkeeper Project
License: MIT
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Log sink configuration."""

    enabled: bool = Field(
        default=True,
        description="Emit scheduler log records at all"
    )
    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Minimum level to emit"
    )
    to_file: bool = Field(
        default=True,
        description="Enable logging to file"
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for log files (created if missing)"
    )
    file_name: str = Field(
        default="cronkeeper.log",
        description="Log file name inside log_dir"
    )
    rotation_size: int = Field(
        default=10485760,  # 10MB
        description="Log file size before rotation (bytes)"
    )
    retention_count: int = Field(
        default=5,
        description="Number of rotated log files to keep"
    )
    json_format: bool = Field(
        default=False,
        description="Render records as JSON"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Accept level names in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v):
        """Ensure file name has no directory part."""
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Log file_name must be a bare file name: {v!r}")
        return v

    @field_validator("rotation_size", "retention_count")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError(f"Value must not be negative: {v}")
        return v


class SchedulingConfig(BaseModel):
    """Dispatcher configuration."""

    timezone: str = Field(
        default="UTC",
        description="Timezone used by the timer backend"
    )
    misfire_grace_time: Optional[int] = Field(
        default=60,
        description="Seconds a late tick may still run (None = always run)"
    )

    @field_validator("misfire_grace_time")
    @classmethod
    def validate_misfire_grace_time(cls, v):
        if v is not None and v < 1:
            raise ValueError(f"misfire_grace_time must be positive: {v}")
        return v


class Config(BaseModel):
    """
    Root configuration model for Cronkeeper.

    Loaded from a YAML file and overridable by environment variables.
    """

    model_config = ConfigDict(validate_assignment=True)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
