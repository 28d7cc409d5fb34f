"""Incremental parser for the watcher's line-oriented event stream.

The watcher writes one event per line as ``<prefix>:<path>`` terminated by
``\\n`` or ``\\r\\n``. Reads from the pipe do not respect line boundaries, so
the parser consumes every complete line it can find and hands back the
trailing partial line as a residual buffer to be prepended to the next chunk.
"""

from dataclasses import dataclass

from wexstream.exceptions import UnexpectedOutputError

from ._models import Action, FileEvent

_LINE_PREFIXES: dict[bytes, Action] = {
    b"access": Action.ACCESS,
    b"create": Action.CREATE,
    b"modify": Action.MODIFY,
    b"remove": Action.REMOVE,
    b"other": Action.OTHER,
}


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of one parser pass.

    Attributes:
        events: Events for every complete line, in stream order.
        residual: Bytes not yet resolved into an event.
    """

    events: tuple[FileEvent, ...]
    residual: bytes


def _skip_terminators(buffer: bytes, cursor: int) -> int:
    """Advance the cursor past any blank-line terminators."""
    while True:
        if buffer.startswith(b"\n", cursor):
            cursor += 1
        elif buffer.startswith(b"\r\n", cursor):
            cursor += 2
        else:
            return cursor


def parse_line(line: bytes) -> FileEvent:
    """Parse a single event line without its terminator.

    Args:
        line: The line contents, e.g. ``b"create:/tmp/one"``.

    Returns:
        The event described by the line.

    Raises:
        ValueError: If the prefix is unknown or the path is not valid UTF-8.
    """
    prefix, separator, raw_path = line.partition(b":")
    action = _LINE_PREFIXES.get(prefix) if separator else None
    if action is None:
        msg = f"Unrecognized event line from watcher: {line!r}"
        raise ValueError(msg)

    try:
        path = raw_path.decode("utf-8")
    except UnicodeDecodeError as e:
        msg = f"Event path from watcher is not valid UTF-8: {raw_path!r}"
        raise ValueError(msg) from e

    return FileEvent(action=action, path=path)


def parse_events(buffer: bytes) -> ParseResult:
    """Parse every complete event line in a buffer.

    Blank lines are skipped. Parsing stops at the first incomplete line,
    which is returned as the residual. A malformed line raises only when no
    event has been collected yet; otherwise the events collected so far are
    returned and the malformed line stays at the head of the residual, so
    the next pass fails on it.

    Args:
        buffer: Carried-over residual followed by newly received bytes.

    Returns:
        The parsed events and the unconsumed tail of the buffer.

    Raises:
        UnexpectedOutputError: If the first complete line is malformed.
    """
    events: list[FileEvent] = []
    cursor = 0

    while True:
        cursor = _skip_terminators(buffer, cursor)
        newline = buffer.find(b"\n", cursor)
        if newline == -1:
            break

        line = buffer[cursor:newline].removesuffix(b"\r")
        try:
            event = parse_line(line)
        except ValueError as e:
            if events:
                break
            raise UnexpectedOutputError(str(e), output=buffer[cursor:]) from e

        events.append(event)
        cursor = newline + 1

    return ParseResult(events=tuple(events), residual=buffer[cursor:])
