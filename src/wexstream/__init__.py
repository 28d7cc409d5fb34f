"""wexstream: typed file events from a watchexec subprocess."""

from wexstream.client import (
    Action,
    DataMessage,
    ExitMessage,
    FileEvent,
    RawMessage,
    Selector,
    Session,
    TaggedMessage,
    WatchConfiguration,
    add_exclude_filter,
    add_include_filter,
    add_watch_root,
    build_configuration,
    parse_data,
    register_with_selector,
    start,
    stop,
    watch_events,
)
from wexstream.exceptions import (
    InstanceExitedError,
    LaunchError,
    StaleSessionError,
    UnexpectedOutputError,
    WexstreamError,
)

__all__ = [
    "Action",
    "DataMessage",
    "ExitMessage",
    "FileEvent",
    "InstanceExitedError",
    "LaunchError",
    "RawMessage",
    "Selector",
    "Session",
    "StaleSessionError",
    "TaggedMessage",
    "UnexpectedOutputError",
    "WatchConfiguration",
    "WexstreamError",
    "add_exclude_filter",
    "add_include_filter",
    "add_watch_root",
    "build_configuration",
    "parse_data",
    "register_with_selector",
    "start",
    "stop",
    "watch_events",
]
