"""Logging utilities for wexstream.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to stderr or to a file. Each logger is
self-contained and does not modify global structlog configuration, so
embedding applications keep full control of their own logging setup.
"""

import functools
import logging
import sys
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


def _get_log_level() -> int:
    """Get the log level from environment variables.

    Checks WEXSTREAM_DEBUG first (sets DEBUG if present), then
    WEXSTREAM_LOG_LEVEL. Defaults to WARNING if neither is set.

    Returns:
        The logging level as an integer.
    """
    if getenv("WEXSTREAM_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(
        getenv("WEXSTREAM_LOG_LEVEL", "warning").upper(), logging.WARNING
    )


def log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, WEXSTREAM_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("WEXSTREAM_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.WARNING)


def create_logger(
    *,
    log_level: int | None = None,
    log_format: LogFormatType = "text",
    log_file: str | Path | None = None,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger.

    Args:
        log_level: Override log level (uses env vars if not specified).
        log_format: Output format, either "json" or "text".
        log_file: File to append to. Writes to stderr when not given.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = log_level if log_level is not None else _get_log_level()

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger_factory = structlog.WriteLoggerFactory(file=log_path.open("a"))
    else:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(effective_level)

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


@functools.cache
def get_default_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Return the shared stderr logger used when callers do not supply one.

    The level comes from WEXSTREAM_DEBUG / WEXSTREAM_LOG_LEVEL and defaults
    to WARNING, so library use is silent unless explicitly enabled.
    """
    return create_logger()
