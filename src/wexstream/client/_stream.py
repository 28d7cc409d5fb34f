"""High-level event iteration over a single watcher session."""

from __future__ import annotations

from typing import TYPE_CHECKING

import anyio

from wexstream.exceptions import InstanceExitedError

from ._session import parse_data, start, stop

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from structlog.typing import FilteringBoundLogger

    from wexstream.config import ClientSettings

    from ._models import FileEvent, WatchConfiguration
    from ._protocol import ProcessLauncher


async def watch_events(
    configuration: WatchConfiguration,
    *,
    settings: ClientSettings | None = None,
    launcher: ProcessLauncher | None = None,
    logger: FilteringBoundLogger | None = None,
) -> AsyncIterator[FileEvent]:
    """Start a watcher and yield its events until the process exits.

    The process is stopped when iteration ends for any reason, including
    cancellation or the caller breaking out of the loop.

    Args:
        configuration: What to watch.
        settings: Client settings. Defaults are used if None.
        launcher: Process launcher. An AnyioLauncher is created if None.
        logger: Logger for lifecycle records.

    Yields:
        File events in the order the watcher reported them, including
        startup events still pending when the process exits.

    Raises:
        LaunchError: If the process could not be started.
        InstanceExitedError: When the process exits.
        UnexpectedOutputError: If the process writes an unrecognised line.
    """
    session = await start(
        configuration, settings=settings, launcher=launcher, logger=logger
    )
    try:
        while True:
            message = await session.handle.receive()
            try:
                session, events = parse_data(session, message)
            except InstanceExitedError as e:
                for event in e.events:
                    yield event
                raise
            for event in events:
                yield event
    finally:
        with anyio.CancelScope(shield=True):
            _ = await stop(session)
