"""Settings models.

This module provides the Pydantic models describing how the watcher
process is launched and how wexstream logs.
"""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingSettings(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty writes to stderr).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.TEXT
    file: str = ""


class ClientSettings(BaseModel):
    """Settings for launching and talking to the watcher process.

    Attributes:
        executable: Watcher executable name (looked up on PATH) or path.
        flush_timeout: Seconds to wait for the startup output to flush.
        read_size: Maximum bytes read from the pipe per message.
        terminate_timeout: Seconds to wait after SIGTERM before SIGKILL.
        max_handles: Maximum number of live processes per launcher.
        logging: Logging section.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    executable: str = "watchexec"
    flush_timeout: float = Field(default=0.1, ge=0)
    read_size: int = Field(default=65536, gt=0)
    terminate_timeout: float = Field(default=5.0, ge=0)
    max_handles: int = Field(default=1024, gt=0)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
