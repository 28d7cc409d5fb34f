"""Client for the watchexec event stream.

This package turns the line-oriented output of an external watcher process
into typed file events.

Key Components:
    - WatchConfiguration: Immutable description of what to watch
    - Session: A live watcher process plus its residual byte buffer
    - parse_events: Incremental, chunk-tolerant line parser
    - Selector: Waits on raw messages from many sessions at once
    - AnyioLauncher: Default process launcher
    - watch_events: Async iterator over one watcher's events

Example:
    >>> from wexstream.client import build_configuration, parse_data, start
    >>> session = await start(build_configuration("/tmp"))
    >>> message = await session.handle.receive()
    >>> session, events = parse_data(session, message)
"""

from ._builder import (
    WATCHER_FLAGS,
    add_exclude_filter,
    add_include_filter,
    add_watch_root,
    build_arguments,
    build_configuration,
    with_working_directory,
)
from ._errors import map_spawn_error
from ._launcher import AnyioLauncher, AnyioProcessHandle, resolve_executable
from ._models import (
    Action,
    DataMessage,
    ExitMessage,
    FileEvent,
    RawMessage,
    TaggedMessage,
    WatchConfiguration,
)
from ._parser import ParseResult, parse_events, parse_line
from ._protocol import ProcessHandle, ProcessLauncher
from ._selector import Selector, register_with_selector
from ._session import Session, parse_data, start, stop
from ._stream import watch_events

__all__ = [
    "WATCHER_FLAGS",
    "Action",
    "AnyioLauncher",
    "AnyioProcessHandle",
    "DataMessage",
    "ExitMessage",
    "FileEvent",
    "ParseResult",
    "ProcessHandle",
    "ProcessLauncher",
    "RawMessage",
    "Selector",
    "Session",
    "TaggedMessage",
    "WatchConfiguration",
    "add_exclude_filter",
    "add_include_filter",
    "add_watch_root",
    "build_arguments",
    "build_configuration",
    "map_spawn_error",
    "parse_data",
    "parse_events",
    "parse_line",
    "register_with_selector",
    "resolve_executable",
    "start",
    "stop",
    "watch_events",
    "with_working_directory",
]
