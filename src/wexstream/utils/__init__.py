"""Utility helpers shared across wexstream."""

from ._logging import (
    LogFormatType,
    create_logger,
    get_default_logger,
    log_level_from_string,
)

__all__ = [
    "LogFormatType",
    "create_logger",
    "get_default_logger",
    "log_level_from_string",
]
