"""Translation of spawn failures into the wexstream error taxonomy."""

import errno

from wexstream.exceptions import (
    ArgumentListTooLongError,
    FileTableOverflowError,
    LaunchError,
    OutOfMemoryError,
    TargetNotExecutableError,
    TargetNotFoundError,
    TooManyOpenFilesError,
    TooManyProcessesError,
)

_SPAWN_ERRORS: dict[int, tuple[type[LaunchError], str]] = {
    errno.ENOENT: (TargetNotFoundError, "target does not exist"),
    errno.EACCES: (TargetNotExecutableError, "target is not executable"),
    errno.ENOEXEC: (TargetNotExecutableError, "target is not executable"),
    errno.ENOMEM: (OutOfMemoryError, "out of memory"),
    errno.EAGAIN: (TooManyProcessesError, "too many processes"),
    errno.E2BIG: (ArgumentListTooLongError, "argument list too long"),
    errno.EMFILE: (TooManyOpenFilesError, "too many open files"),
    errno.ENFILE: (FileTableOverflowError, "file table overflow"),
}


def map_spawn_error(error: OSError, *, executable: str) -> LaunchError | None:
    """Map an OSError raised while spawning to a LaunchError.

    Args:
        error: The error raised by the process launcher.
        executable: The executable that was being spawned.

    Returns:
        The matching LaunchError, or None if the errno is not a known
        launch failure and the original error should propagate.
    """
    if error.errno not in _SPAWN_ERRORS:
        return None

    error_class, reason = _SPAWN_ERRORS[error.errno]
    msg = f"Failed to start watcher '{executable}': {reason}"
    return error_class(msg, executable=executable, cause=error)
