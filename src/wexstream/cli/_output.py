"""Event sinks for the command-line interface.

This module defines the EventSink protocol and its implementations:
- ConsoleEventSink: Styled, human-readable lines via rich
- JsonEventSink: One JSON object per line via orjson
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Protocol, final, runtime_checkable

import orjson
from rich.console import Console
from rich.style import Style
from rich.text import Text

from wexstream.client import Action

if TYPE_CHECKING:
    from typing import TextIO

    from wexstream.client import FileEvent


@runtime_checkable
class EventSink(Protocol):
    """Protocol for consuming file events.

    The protocol is async so implementations can write to slow
    destinations without blocking the receive loop.
    """

    async def write_event(self, event: FileEvent) -> None:
        """Write a single file event.

        Args:
            event: The event to record.
        """
        ...


@final
class ConsoleEventSink:
    """Event sink that writes `ACTION path` lines with color coding."""

    __slots__ = ("_action_styles", "_console")

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the sink.

        Args:
            console: Rich Console instance for output. If None, creates a new one.
        """
        self._console = console or Console()
        self._action_styles: dict[Action, Style] = {
            Action.CREATE: Style(color="green", bold=True),
            Action.MODIFY: Style(color="yellow"),
            Action.REMOVE: Style(color="red", bold=True),
            Action.ACCESS: Style(dim=True),
            Action.OTHER: Style(color="magenta", dim=True),
        }

    async def write_event(self, event: FileEvent) -> None:
        """Write an event with its action label styled."""
        style = self._action_styles.get(event.action, Style())

        text = Text()
        _ = text.append(f"{event.action.value.upper():<6}", style=style)
        _ = text.append(" ")
        _ = text.append(event.path)

        self._console.print(text, soft_wrap=True)


@final
class JsonEventSink:
    """Event sink that writes one JSON object per line."""

    __slots__ = ("_stream",)

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize the sink.

        Args:
            stream: Text stream to write to. Defaults to standard output.
        """
        self._stream = stream or sys.stdout

    async def write_event(self, event: FileEvent) -> None:
        """Write an event as `{"action": ..., "path": ...}`."""
        line = orjson.dumps({"action": event.action.value, "path": event.path})
        _ = self._stream.write(line.decode("utf-8") + "\n")
        self._stream.flush()
