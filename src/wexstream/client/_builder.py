"""Configuration builder for watcher sessions.

Each function returns a new WatchConfiguration; the input is never modified.
"""

import os
from dataclasses import replace

from ._models import WatchConfiguration

# Emit events only, to standard output, without the watcher's default ignores
WATCHER_FLAGS: tuple[str, ...] = (
    "--only-emit-events",
    "--emit-events-to=stdio",
    "--no-default-ignore",
)


def build_configuration(root: str | os.PathLike[str]) -> WatchConfiguration:
    """Create a configuration watching a single root with no filters.

    Args:
        root: The first path to watch.

    Returns:
        A new WatchConfiguration.
    """
    return WatchConfiguration(watch_roots=(os.fspath(root),))


def add_watch_root(
    configuration: WatchConfiguration, path: str | os.PathLike[str]
) -> WatchConfiguration:
    """Return a copy of the configuration with another watch root appended."""
    return replace(
        configuration,
        watch_roots=(*configuration.watch_roots, os.fspath(path)),
    )


def add_include_filter(
    configuration: WatchConfiguration, pattern: str
) -> WatchConfiguration:
    """Return a copy of the configuration with an include filter appended."""
    return replace(
        configuration,
        include_filters=(*configuration.include_filters, pattern),
    )


def add_exclude_filter(
    configuration: WatchConfiguration, pattern: str
) -> WatchConfiguration:
    """Return a copy of the configuration with an exclude filter appended."""
    return replace(
        configuration,
        exclude_filters=(*configuration.exclude_filters, pattern),
    )


def with_working_directory(
    configuration: WatchConfiguration, path: str | os.PathLike[str] | None
) -> WatchConfiguration:
    """Return a copy of the configuration spawning the process in ``path``."""
    working_directory = os.fspath(path) if path is not None else None
    return replace(configuration, working_directory=working_directory)


def build_arguments(configuration: WatchConfiguration) -> list[str]:
    """Translate a configuration into watcher command-line arguments.

    Args:
        configuration: The configuration to translate.

    Returns:
        Arguments to pass after the executable name.
    """
    arguments = list(WATCHER_FLAGS)
    for root in configuration.watch_roots:
        arguments.extend(("--watch", root))
    for pattern in configuration.include_filters:
        arguments.extend(("--filter", pattern))
    for pattern in configuration.exclude_filters:
        arguments.extend(("--ignore", pattern))
    return arguments
