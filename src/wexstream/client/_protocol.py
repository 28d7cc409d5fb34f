"""Protocol definitions for the process launcher boundary.

The client core depends on the external process only through these
interfaces, which keeps the parser and session logic independent of how the
process is actually started:
- ProcessHandle: A running process that yields raw messages
- ProcessLauncher: Factory that spawns processes
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._models import RawMessage


@runtime_checkable
class ProcessHandle(Protocol):
    """Protocol for a spawned watcher process.

    A handle is owned by exactly one session at a time. Once the process
    has exited, every further receive returns the same exit message.
    """

    @property
    def pid(self) -> int | None:
        """Return the process ID if known."""
        ...

    async def receive(self) -> RawMessage:
        """Wait for the next chunk of output or the exit notification.

        Returns:
            A DataMessage with newly read bytes, or an ExitMessage once
            standard output is exhausted and the process has exited.
        """
        ...

    async def terminate(self) -> bool:
        """Terminate the process.

        Returns:
            True if a running process was terminated, False if it had
            already exited.
        """
        ...


@runtime_checkable
class ProcessLauncher(Protocol):
    """Protocol for spawning watcher processes."""

    async def spawn(
        self,
        executable: str,
        arguments: Sequence[str],
        *,
        cwd: str | None = None,
    ) -> ProcessHandle:
        """Spawn a process with its standard output piped.

        Args:
            executable: Executable name or path.
            arguments: Arguments following the executable.
            cwd: Working directory, or None to inherit.

        Returns:
            A handle owning the new process.

        Raises:
            LaunchError: If the process could not be started.
        """
        ...
