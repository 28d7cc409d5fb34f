"""The command-line interface for wexstream."""

from cyclopts import App
from rich.console import Console

from ._watch import app as watch_app

APP_HELP = "Stream typed file events from a watchexec process."


def register_commands(app: App) -> None:
    """Register all subcommands on an app."""
    app.command(watch_app)


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Create a CLI app, optionally bound to specific consoles."""
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="wexstream",
        help=APP_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )
    register_commands(app)
    return app


app = App(name="wexstream", help=APP_HELP, help_on_error=True)
register_commands(app)


def main() -> None:
    """Default entrypoint for the `wexstream` CLI."""
    app = create_app()
    app()


if __name__ == "__main__":
    app()
