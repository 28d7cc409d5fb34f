"""Watcher sessions.

A Session pairs a watcher process handle with the bytes received from it
that have not yet been resolved into events. Sessions are advanced by
`parse_data`, which returns a successor and marks the old session stale, so
each raw message is parsed against exactly one buffer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never, final

import anyio

from wexstream.config import ClientSettings
from wexstream.exceptions import InstanceExitedError, StaleSessionError
from wexstream.utils import get_default_logger

from ._builder import build_arguments
from ._launcher import AnyioLauncher
from ._models import DataMessage, ExitMessage
from ._parser import parse_events

if TYPE_CHECKING:
    from collections.abc import Sequence

    from structlog.typing import FilteringBoundLogger

    from ._models import FileEvent, RawMessage, WatchConfiguration
    from ._protocol import ProcessHandle, ProcessLauncher


@final
class Session:
    """A live watch session.

    Attributes:
        handle: The process handle owned by this session.
        buffer: Bytes received but not yet resolved into events.
        pending_events: Events parsed during startup, not yet handed out.
    """

    __slots__ = ("_buffer", "_handle", "_pending", "_stale")

    def __init__(
        self,
        handle: ProcessHandle,
        buffer: bytes = b"",
        *,
        pending: Sequence[FileEvent] = (),
    ) -> None:
        """Initialize the session.

        Args:
            handle: The process handle to own.
            buffer: Residual bytes carried over from earlier reads.
            pending: Events to return ahead of the next parsed batch.
        """
        self._handle = handle
        self._buffer = buffer
        self._pending = tuple(pending)
        self._stale = False

    def __repr__(self) -> str:
        return (
            f"Session(pid={self._handle.pid}, buffered={len(self._buffer)}, "
            f"stale={self._stale})"
        )

    @property
    def handle(self) -> ProcessHandle:
        """Return the process handle owned by this session."""
        return self._handle

    @property
    def buffer(self) -> bytes:
        """Return the residual bytes awaiting a line terminator."""
        return self._buffer

    @property
    def pending_events(self) -> tuple[FileEvent, ...]:
        """Return events parsed at startup that have not been handed out."""
        return self._pending

    @property
    def is_stale(self) -> bool:
        """Return True once this session has been replaced by a successor."""
        return self._stale

    def ensure_current(self) -> None:
        """Raise if this session has been replaced.

        Raises:
            StaleSessionError: If `parse_data` already returned a successor.
        """
        if self._stale:
            msg = (
                "Session has been replaced by a newer session; "
                "use the session returned by the last parse_data call"
            )
            raise StaleSessionError(msg)


async def start(
    configuration: WatchConfiguration,
    *,
    settings: ClientSettings | None = None,
    launcher: ProcessLauncher | None = None,
    logger: FilteringBoundLogger | None = None,
) -> Session:
    """Spawn the watcher and open a session on it.

    After spawning, waits up to `settings.flush_timeout` for the first output
    so that the blank line the watcher writes on startup is discarded. Any
    events in that first chunk are kept and returned by the first
    `parse_data` call. If the flush fails or is cancelled, the process is
    terminated before the error propagates.

    Args:
        configuration: What to watch.
        settings: Client settings. Defaults are used if None.
        launcher: Process launcher. An AnyioLauncher is created if None.
        logger: Logger for lifecycle records.

    Returns:
        A new, current Session.

    Raises:
        LaunchError: If the process could not be started.
        InstanceExitedError: If the process exited during the startup flush.
        UnexpectedOutputError: If the startup output is not event lines.
    """
    settings = settings or ClientSettings()
    logger = logger or get_default_logger()
    launcher = launcher or AnyioLauncher.from_settings(settings, logger=logger)

    handle = await launcher.spawn(
        settings.executable,
        build_arguments(configuration),
        cwd=configuration.working_directory,
    )

    try:
        session = await _flush_startup(handle, settings.flush_timeout)
    except BaseException:
        # The caller never receives a session, so nobody else can stop it
        with anyio.CancelScope(shield=True):
            _ = await handle.terminate()
        raise

    logger.debug(
        "startup_flush",
        pid=handle.pid,
        pending=len(session.pending_events),
        buffered=len(session.buffer),
    )
    return session


async def _flush_startup(handle: ProcessHandle, flush_timeout: float) -> Session:
    """Consume the watcher's first output and build the initial session."""
    message: RawMessage | None = None
    with anyio.move_on_after(flush_timeout):
        message = await handle.receive()

    match message:
        case None:
            return Session(handle)
        case ExitMessage(code=code):
            msg = f"Watcher exited during startup with code {code}"
            raise InstanceExitedError(msg, exit_code=code, output=b"")
        case DataMessage(chunk=chunk):
            result = parse_events(chunk)
            return Session(handle, result.residual, pending=result.events)
        case _:
            assert_never(message)


def parse_data(
    session: Session, message: RawMessage
) -> tuple[Session, list[FileEvent]]:
    """Advance a session with one raw message.

    On success the given session becomes stale and must not be used again;
    all further calls must use the returned session. On failure the given
    session is left unchanged and current.

    Args:
        session: The current session.
        message: The next raw message received from the session's handle.

    Returns:
        The successor session and the events completed by this message.

    Raises:
        StaleSessionError: If the session has already been replaced.
        InstanceExitedError: If the message reports that the process exited.
            Startup events not yet handed out are attached as `events`.
        UnexpectedOutputError: If the output is not a recognised event line.
    """
    session.ensure_current()

    match message:
        case ExitMessage(code=code):
            msg = f"Watcher exited with code {code}"
            raise InstanceExitedError(
                msg,
                exit_code=code,
                output=session.buffer,
                events=session.pending_events,
            )
        case DataMessage(chunk=chunk):
            result = parse_events(session.buffer + chunk)
        case _:
            assert_never(message)

    successor = Session(session.handle, result.residual)
    events = [*session.pending_events, *result.events]
    session._stale = True  # noqa: SLF001
    return successor, events


async def stop(session: Session) -> bool:
    """Terminate the session's watcher process.

    Safe to call repeatedly; only the first call on a running process
    returns True.

    Returns:
        True if a running process was terminated, False if it had already
        exited.

    Raises:
        StaleSessionError: If the session has already been replaced.
    """
    session.ensure_current()
    return await session.handle.terminate()
