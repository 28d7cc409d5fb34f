"""The wexstream command-line interface."""

from ._app import app, create_app, main, register_commands
from ._output import ConsoleEventSink, EventSink, JsonEventSink
from ._shared import ExitCode, exit_with_error

__all__ = [
    "ConsoleEventSink",
    "EventSink",
    "ExitCode",
    "JsonEventSink",
    "app",
    "create_app",
    "exit_with_error",
    "main",
    "register_commands",
]
