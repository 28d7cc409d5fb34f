# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""wexstream watch command - streams file events to the terminal."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

import anyio
from cyclopts import App, Parameter

from wexstream.client import (
    add_exclude_filter,
    add_include_filter,
    add_watch_root,
    build_configuration,
    watch_events,
)
from wexstream.config import load_settings
from wexstream.exceptions import (
    ConfigError,
    InstanceExitedError,
    LaunchError,
    UnexpectedOutputError,
)
from wexstream.utils import create_logger, log_level_from_string

from ._output import ConsoleEventSink, JsonEventSink
from ._shared import ExitCode, exit_with_error

if TYPE_CHECKING:
    from collections.abc import Sequence

    from structlog.typing import FilteringBoundLogger

    from wexstream.client import WatchConfiguration
    from wexstream.config import ClientSettings

    from ._output import EventSink

OutputFormat = Literal["text", "json"]

app = App(
    name="watch",
    help="Stream file events reported by watchexec.",
    help_on_error=True,
)


def build_watch_configuration(
    roots: Sequence[Path],
    filters: Sequence[str] = (),
    ignores: Sequence[str] = (),
) -> WatchConfiguration:
    """Build a watch configuration from command-line values.

    Args:
        roots: Paths to watch; must not be empty.
        filters: Include patterns.
        ignores: Exclude patterns.

    Returns:
        The combined WatchConfiguration.
    """
    first, *rest = roots
    configuration = build_configuration(first)
    for root in rest:
        configuration = add_watch_root(configuration, root)
    for pattern in filters:
        configuration = add_include_filter(configuration, pattern)
    for pattern in ignores:
        configuration = add_exclude_filter(configuration, pattern)
    return configuration


async def run_watch(
    configuration: WatchConfiguration,
    settings: ClientSettings,
    sink: EventSink,
    logger: FilteringBoundLogger,
) -> None:
    """Write every event from a watcher session to the sink."""
    async for event in watch_events(configuration, settings=settings, logger=logger):
        await sink.write_event(event)


@app.default
def watch(  # noqa: PLR0913
    roots: Annotated[
        list[Path],
        Parameter(help="Paths to watch."),
    ],
    *,
    filters: Annotated[
        list[str] | None,
        Parameter(name="--filter", help="Only report paths matching this pattern."),
    ] = None,
    ignores: Annotated[
        list[str] | None,
        Parameter(name="--ignore", help="Do not report paths matching this pattern."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        Parameter(name="--format", help="Output format."),
    ] = "text",
    config: Annotated[
        Path | None,
        Parameter(name="--config", help="Path to a TOML settings file."),
    ] = None,
    executable: Annotated[
        str | None,
        Parameter(help="Watcher executable name or path."),
    ] = None,
) -> None:
    """Watch paths and print one line per file event.

    Runs until the watcher exits or the command is interrupted.
    """
    overrides: dict[str, object] | None = None
    if executable is not None:
        overrides = {"executable": executable}

    try:
        settings = load_settings(config, overrides=overrides)
    except FileNotFoundError as e:
        exit_with_error(f"Settings file not found: {e.filename}", ExitCode.CONFIG_ERROR)
    except ConfigError as e:
        exit_with_error(str(e), ExitCode.CONFIG_ERROR)

    logger = create_logger(
        log_level=log_level_from_string(settings.logging.level, respect_env=True),
        log_format=settings.logging.format.value,  # type: ignore[arg-type]
        log_file=settings.logging.file or None,
    )
    configuration = build_watch_configuration(roots, filters or (), ignores or ())
    sink: EventSink = (
        JsonEventSink() if output_format == "json" else ConsoleEventSink()
    )

    try:
        anyio.run(run_watch, configuration, settings, sink, logger)
    except KeyboardInterrupt:
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except LaunchError as e:
        exit_with_error(str(e), ExitCode.LAUNCH_ERROR)
    except InstanceExitedError as e:
        exit_with_error(str(e), ExitCode.INSTANCE_EXITED)
    except UnexpectedOutputError as e:
        exit_with_error(str(e), ExitCode.UNEXPECTED_OUTPUT)
