"""Data models for the watcher client.

This module defines the core data types exchanged with callers:
- Action: Category of a filesystem change
- FileEvent: Immutable (action, path) event record
- WatchConfiguration: Immutable description of what to watch
- DataMessage / ExitMessage: Raw delivery units from the watcher process
- TaggedMessage: A raw message labelled with the session it came from
"""

from collections.abc import Hashable
from dataclasses import dataclass
from enum import StrEnum


class Action(StrEnum):
    """Filesystem change categories reported by the watcher.

    Values match the line prefixes written by the watcher process:
    - ACCESS: Entry was read or opened
    - CREATE: Entry was created
    - MODIFY: Entry contents or metadata changed
    - REMOVE: Entry was deleted
    - OTHER: Any other change the watcher reports
    """

    ACCESS = "access"
    CREATE = "create"
    MODIFY = "modify"
    REMOVE = "remove"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class FileEvent:
    """Immutable filesystem change event.

    Attributes:
        action: Kind of change.
        path: Affected path exactly as reported by the watcher process.
    """

    action: Action
    path: str


@dataclass(frozen=True, slots=True)
class WatchConfiguration:
    """Configuration for a watcher process.

    Built with the functions in ``wexstream.client._builder`` rather than
    directly, so that at least one watch root is always present.

    Attributes:
        watch_roots: Paths to watch, in the order they are passed to the process.
        include_filters: Patterns forwarded with ``--filter``.
        exclude_filters: Patterns forwarded with ``--ignore``.
        working_directory: Working directory for the process, or None to inherit.
    """

    watch_roots: tuple[str, ...]
    include_filters: tuple[str, ...] = ()
    exclude_filters: tuple[str, ...] = ()
    working_directory: str | None = None


@dataclass(frozen=True, slots=True)
class DataMessage:
    """A chunk of bytes read from the watcher's standard output."""

    chunk: bytes


@dataclass(frozen=True, slots=True)
class ExitMessage:
    """Terminal notification that the watcher process exited."""

    code: int


RawMessage = DataMessage | ExitMessage


@dataclass(frozen=True, slots=True)
class TaggedMessage:
    """A raw message labelled with the tag its session was registered under.

    Attributes:
        tag: Caller-chosen label identifying the session.
        message: The raw message delivered by the session's process.
    """

    tag: Hashable
    message: RawMessage
