"""wexstream exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from wexstream.client import FileEvent


class WexstreamError(Exception):
    """Base exception for wexstream errors."""


# =============================================================================
# Launch Exceptions
# =============================================================================


class LaunchError(WexstreamError):
    """Base exception for failures to start the watcher process."""

    def __init__(
        self,
        message: str,
        *,
        executable: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and launch context."""
        super().__init__(message)
        self.executable: str = executable
        self.cause: Exception | None = cause


class ExecutableNotFoundError(LaunchError):
    """The watcher executable could not be located on PATH."""


class TargetNotFoundError(LaunchError):
    """The resolved executable path does not exist."""


class TargetNotExecutableError(LaunchError):
    """The resolved executable path exists but cannot be executed."""


class ResourceExhaustedError(LaunchError):
    """Base exception for operating system resource limits hit at spawn time."""


class TooManyHandlesError(ResourceExhaustedError):
    """The launcher already owns its maximum number of process handles."""


class OutOfMemoryError(ResourceExhaustedError):
    """Not enough memory to spawn the process."""


class TooManyProcessesError(ResourceExhaustedError):
    """The operating system refused to create another process."""


class ArgumentListTooLongError(ResourceExhaustedError):
    """The argument list exceeds the operating system limit."""


class TooManyOpenFilesError(ResourceExhaustedError):
    """The current process has run out of file descriptors."""


class FileTableOverflowError(ResourceExhaustedError):
    """The system-wide open file table is full."""


# =============================================================================
# Session Exceptions
# =============================================================================


class InstanceExitedError(WexstreamError):
    """The watcher process exited.

    Attributes:
        exit_code: Exit status reported for the process.
        output: Bytes received from the process but never resolved into events.
        events: Events parsed before the exit that were never handed out.
    """

    def __init__(
        self,
        message: str,
        *,
        exit_code: int,
        output: bytes = b"",
        events: Sequence[FileEvent] = (),
    ) -> None:
        """Initialize with error message, exit code and unconsumed output."""
        super().__init__(message)
        self.exit_code: int = exit_code
        self.output: bytes = output
        self.events: tuple[FileEvent, ...] = tuple(events)


class UnexpectedOutputError(WexstreamError):
    """The watcher process wrote a line that is not a recognised event.

    Attributes:
        output: The unparsed bytes, starting at the offending line.
    """

    def __init__(self, message: str, *, output: bytes) -> None:
        """Initialize with error message and the offending bytes."""
        super().__init__(message)
        self.output: bytes = output


class StaleSessionError(WexstreamError):
    """A session was used after it had been replaced by a newer one."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(WexstreamError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
