"""Multiplexing raw messages from many sessions onto one stream.

The Selector lets a caller wait on several watcher sessions at once. Each
registered session gets a pump task that forwards its raw messages, tagged
with a caller-chosen label, into a shared anyio memory object stream.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Self, final

import anyio
import anyio.abc

from ._models import ExitMessage, TaggedMessage

if TYPE_CHECKING:
    from collections.abc import Hashable
    from types import TracebackType

    from anyio.streams.memory import MemoryObjectSendStream

    from ._protocol import ProcessHandle
    from ._session import Session


@final
class Selector:
    """Waits on raw messages from any number of sessions.

    Use as an async context manager. Registered pumps are cancelled when the
    context exits; the processes themselves are left to their sessions.

    Example:
        >>> async with Selector() as selector:
        ...     register_with_selector(selector, session, tag="src")
        ...     async for tagged in selector:
        ...         session, events = parse_data(session, tagged.message)
    """

    __slots__ = ("_receive_stream", "_send_stream", "_task_group")

    def __init__(self, max_buffer_size: float = math.inf) -> None:
        """Initialize the selector.

        Args:
            max_buffer_size: Messages held before pumps block on send.
        """
        self._send_stream, self._receive_stream = anyio.create_memory_object_stream[
            TaggedMessage
        ](max_buffer_size)
        self._task_group: anyio.abc.TaskGroup | None = None

    async def __aenter__(self) -> Self:
        task_group = anyio.create_task_group()
        _ = await task_group.__aenter__()
        self._task_group = task_group
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        task_group, self._task_group = self._task_group, None
        try:
            if task_group is None:
                return None
            task_group.cancel_scope.cancel()
            return await task_group.__aexit__(exc_type, exc_val, exc_tb)
        finally:
            self._send_stream.close()
            self._receive_stream.close()

    def register(self, session: Session, tag: Hashable | None = None) -> Hashable:
        """Start forwarding a session's raw messages.

        Args:
            session: A current session. Its handle must not be received from
                by anything else while registered.
            tag: Label attached to the session's messages. Defaults to the
                session's process handle, which stays the same across
                successor sessions.

        Returns:
            The tag the session was registered under.

        Raises:
            StaleSessionError: If the session has already been replaced.
            RuntimeError: If the selector is not running.
        """
        session.ensure_current()
        if self._task_group is None:
            msg = "Selector is not running; use 'async with Selector()'"
            raise RuntimeError(msg)

        effective_tag: Hashable = session.handle if tag is None else tag
        self._task_group.start_soon(
            self._pump, session.handle, effective_tag, self._send_stream.clone()
        )
        return effective_tag

    async def receive(self) -> TaggedMessage:
        """Wait for the next message from any registered session."""
        return await self._receive_stream.receive()

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> TaggedMessage:
        try:
            return await self._receive_stream.receive()
        except anyio.EndOfStream:
            raise StopAsyncIteration from None

    @staticmethod
    async def _pump(
        handle: ProcessHandle,
        tag: Hashable,
        send_stream: MemoryObjectSendStream[TaggedMessage],
    ) -> None:
        """Forward messages from one handle until the process exits."""
        async with send_stream:
            while True:
                message = await handle.receive()
                try:
                    await send_stream.send(TaggedMessage(tag=tag, message=message))
                except (anyio.BrokenResourceError, anyio.ClosedResourceError):
                    # Selector closed, nobody is listening any more
                    return
                if isinstance(message, ExitMessage):
                    return


def register_with_selector(
    selector: Selector, session: Session, tag: Hashable | None = None
) -> Hashable:
    """Register a session with a selector.

    Args:
        selector: A running selector.
        session: The session whose messages should be forwarded.
        tag: Label for the session's messages; defaults to its handle.

    Returns:
        The tag the session was registered under.
    """
    return selector.register(session, tag)
