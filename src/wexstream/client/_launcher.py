"""anyio-based process launcher.

This module provides the default ProcessLauncher, which spawns the watcher
with anyio and exposes its standard output as a sequence of raw messages.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from typing import TYPE_CHECKING, final

import anyio
import anyio.abc

from wexstream.config import ClientSettings
from wexstream.exceptions import ExecutableNotFoundError, TooManyHandlesError
from wexstream.utils import get_default_logger

from ._errors import map_spawn_error
from ._models import DataMessage, ExitMessage

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from structlog.typing import FilteringBoundLogger

    from ._models import RawMessage

# Same defaults as ClientSettings
_SETTINGS_FIELDS = ClientSettings.model_fields
DEFAULT_READ_SIZE: int = _SETTINGS_FIELDS["read_size"].default
DEFAULT_TERMINATE_TIMEOUT: float = _SETTINGS_FIELDS["terminate_timeout"].default
DEFAULT_MAX_HANDLES: int = _SETTINGS_FIELDS["max_handles"].default


def resolve_executable(executable: str) -> str:
    """Resolve an executable name to a path.

    Names containing a path separator are returned unchanged and checked by
    the operating system at spawn time. Bare names are looked up on PATH.

    Args:
        executable: Executable name or path.

    Returns:
        The path to spawn.

    Raises:
        ExecutableNotFoundError: If a bare name is not found on PATH.
    """
    separators = tuple(sep for sep in (os.sep, os.altsep) if sep)
    if any(sep in executable for sep in separators):
        return executable

    resolved = shutil.which(executable)
    if resolved is None:
        msg = f"Watcher executable '{executable}' not found on PATH"
        raise ExecutableNotFoundError(msg, executable=executable)
    return resolved


@final
class AnyioProcessHandle:
    """Handle owning one watcher process spawned with anyio.

    Reads standard output in chunks of at most `read_size` bytes. After the
    output is exhausted the process is reaped and its exit code is reported
    by every subsequent receive.
    """

    __slots__ = (
        "_exit_code",
        "_logger",
        "_on_release",
        "_process",
        "_read_size",
        "_terminate_timeout",
    )

    def __init__(
        self,
        process: anyio.abc.Process,
        *,
        read_size: int = DEFAULT_READ_SIZE,
        terminate_timeout: float = DEFAULT_TERMINATE_TIMEOUT,
        logger: FilteringBoundLogger | None = None,
        on_release: Callable[[AnyioProcessHandle], None] | None = None,
    ) -> None:
        """Initialize the handle.

        Args:
            process: The spawned process, with standard output piped.
            read_size: Maximum bytes per DataMessage.
            terminate_timeout: Seconds to wait after SIGTERM before SIGKILL.
            logger: Logger for lifecycle records.
            on_release: Called once the process has been reaped.
        """
        self._process = process
        self._read_size = read_size
        self._terminate_timeout = terminate_timeout
        self._logger = logger or get_default_logger()
        self._on_release = on_release
        self._exit_code: int | None = None

    @property
    def pid(self) -> int | None:
        """Return the process ID."""
        return self._process.pid

    @property
    def exit_code(self) -> int | None:
        """Return the exit code once the process has been reaped."""
        return self._exit_code

    async def receive(self) -> RawMessage:
        """Wait for the next chunk of output or the exit notification."""
        if self._exit_code is None and self._process.stdout is not None:
            try:
                chunk = await self._process.stdout.receive(self._read_size)
            except (
                anyio.EndOfStream,
                anyio.ClosedResourceError,
                anyio.BrokenResourceError,
            ):
                # Output exhausted, fall through to reaping the process
                pass
            else:
                return DataMessage(chunk)

        return ExitMessage(await self._reap())

    async def terminate(self) -> bool:
        """Terminate the process, escalating to SIGKILL after the timeout."""
        if self._exit_code is not None or self._process.returncode is not None:
            _ = await self._reap()
            return False

        try:
            self._process.terminate()
        except ProcessLookupError:
            _ = await self._reap()
            return False

        with anyio.move_on_after(self._terminate_timeout):
            _ = await self._process.wait()

        if self._process.returncode is None:
            self._process.kill()

        exit_code = await self._reap()
        self._logger.debug("process_terminated", pid=self.pid, exit_code=exit_code)
        return True

    async def _reap(self) -> int:
        """Wait for the process to exit and release its resources."""
        if self._exit_code is None:
            exit_code = await self._process.wait()
            await self._process.aclose()
            self._exit_code = exit_code
            if self._on_release is not None:
                self._on_release(self)
        return self._exit_code


@final
class AnyioLauncher:
    """Spawns watcher processes with anyio.

    Tracks the handles it has spawned and refuses to spawn more than
    `max_handles` live processes at once.
    """

    __slots__ = (
        "_active",
        "_logger",
        "_max_handles",
        "_read_size",
        "_terminate_timeout",
    )

    def __init__(
        self,
        *,
        max_handles: int = DEFAULT_MAX_HANDLES,
        read_size: int = DEFAULT_READ_SIZE,
        terminate_timeout: float = DEFAULT_TERMINATE_TIMEOUT,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the launcher.

        Args:
            max_handles: Maximum number of live processes.
            read_size: Maximum bytes per DataMessage.
            terminate_timeout: Seconds to wait after SIGTERM before SIGKILL.
            logger: Logger for lifecycle records.
        """
        self._max_handles = max_handles
        self._read_size = read_size
        self._terminate_timeout = terminate_timeout
        self._logger = logger or get_default_logger()
        self._active: set[AnyioProcessHandle] = set()

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> AnyioLauncher:
        """Create a launcher configured from client settings."""
        return cls(
            max_handles=settings.max_handles,
            read_size=settings.read_size,
            terminate_timeout=settings.terminate_timeout,
            logger=logger,
        )

    @property
    def active_count(self) -> int:
        """Return the number of spawned processes not yet reaped."""
        return len(self._active)

    async def spawn(
        self,
        executable: str,
        arguments: Sequence[str],
        *,
        cwd: str | None = None,
    ) -> AnyioProcessHandle:
        """Spawn the watcher with its standard output piped.

        Raises:
            TooManyHandlesError: If `max_handles` processes are already live.
            ExecutableNotFoundError: If the executable is not on PATH.
            LaunchError: For operating system spawn failures.
            OSError: For spawn failures outside the known set.
        """
        if len(self._active) >= self._max_handles:
            msg = (
                f"Cannot start watcher '{executable}': "
                f"{self._max_handles} processes already running"
            )
            raise TooManyHandlesError(msg, executable=executable)

        resolved = resolve_executable(executable)
        command = [resolved, *arguments]

        try:
            process = await anyio.open_process(
                command,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=None,
            )
        except OSError as e:
            error = map_spawn_error(e, executable=resolved)
            if error is None:
                raise
            raise error from e

        handle = AnyioProcessHandle(
            process,
            read_size=self._read_size,
            terminate_timeout=self._terminate_timeout,
            logger=self._logger,
            on_release=self._active.discard,
        )
        self._active.add(handle)
        self._logger.debug("process_spawned", pid=process.pid, command=command)
        return handle
