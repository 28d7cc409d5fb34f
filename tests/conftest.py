"""Shared test fixtures for wexstream tests."""

from collections.abc import Sequence

import anyio
import pytest

from wexstream.client import ExitMessage, ProcessHandle, RawMessage
from wexstream.exceptions import LaunchError


class FakeProcessHandle:
    """Process handle that replays a fixed script of raw messages.

    Once the script is exhausted, receive blocks forever, like a live
    process that has nothing more to say. After an exit message every
    receive repeats it.
    """

    def __init__(self, messages: Sequence[RawMessage] = (), *, pid: int = 4242) -> None:
        self.messages: list[RawMessage] = list(messages)
        self.pid: int | None = pid
        self.exit_message: ExitMessage | None = None
        self.terminated = False
        self.terminate_calls = 0
        self.receive_calls = 0

    async def receive(self) -> RawMessage:
        self.receive_calls += 1
        if self.exit_message is not None:
            return self.exit_message
        if not self.messages:
            await anyio.sleep_forever()
        message = self.messages.pop(0)
        if isinstance(message, ExitMessage):
            self.exit_message = message
        return message

    async def terminate(self) -> bool:
        self.terminate_calls += 1
        if self.terminated or self.exit_message is not None:
            return False
        self.terminated = True
        self.exit_message = ExitMessage(-15)
        return True


class FakeLauncher:
    """Launcher that hands out a prepared handle or raises a prepared error."""

    def __init__(
        self,
        handle: ProcessHandle | None = None,
        *,
        error: LaunchError | OSError | None = None,
    ) -> None:
        self.handle = handle or FakeProcessHandle()
        self.error = error
        self.calls: list[tuple[str, list[str], str | None]] = []

    async def spawn(
        self,
        executable: str,
        arguments: Sequence[str],
        *,
        cwd: str | None = None,
    ) -> ProcessHandle:
        self.calls.append((executable, list(arguments), cwd))
        if self.error is not None:
            raise self.error
        return self.handle


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
