"""Tests for the wexstream watch command."""

from __future__ import annotations

import contextlib
import io
from pathlib import Path
from typing import TYPE_CHECKING, cast

import pytest
from cyclopts import App
from rich.console import Console

from wexstream.cli import (
    ConsoleEventSink,
    ExitCode,
    JsonEventSink,
    create_app,
    register_commands,
)
from wexstream.cli._watch import build_watch_configuration, run_watch, watch
from wexstream.client import WatchConfiguration
from wexstream.config import ClientSettings
from wexstream.exceptions import (
    InstanceExitedError,
    TargetNotFoundError,
    UnexpectedOutputError,
)

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("WEXSTREAM_EXECUTABLE", "WEXSTREAM_DEBUG", "WEXSTREAM_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


class TestCommandRegistration:
    def test_register_commands_registers_watch(self, mocker: MockerFixture) -> None:
        mock_app = mocker.MagicMock(spec=App)
        register_commands(mock_app)

        assert cast("int", mock_app.command.call_count) == 1  # pyright: ignore[reportAny]


class TestBuildWatchConfiguration:
    def test_combines_roots_and_patterns(self) -> None:
        configuration = build_watch_configuration(
            [Path("/a"), Path("/b")], ["*.py"], ["*.pyc", "build/**"]
        )

        assert configuration == WatchConfiguration(
            watch_roots=("/a", "/b"),
            include_filters=("*.py",),
            exclude_filters=("*.pyc", "build/**"),
        )

    def test_single_root(self) -> None:
        configuration = build_watch_configuration([Path("/src")])
        assert configuration.watch_roots == ("/src",)
        assert configuration.include_filters == ()


class TestWatch:
    def test_runs_with_loaded_settings(self, mocker: MockerFixture) -> None:
        run = mocker.patch("anyio.run")

        watch([Path("/src")], filters=["*.py"], executable="/opt/watchexec")

        run.assert_called_once()
        func, configuration, settings, sink, _logger = run.call_args.args
        assert func is run_watch
        assert configuration.watch_roots == ("/src",)
        assert configuration.include_filters == ("*.py",)
        assert settings.executable == "/opt/watchexec"
        assert isinstance(sink, ConsoleEventSink)

    def test_json_format_selects_json_sink(self, mocker: MockerFixture) -> None:
        run = mocker.patch("anyio.run")

        watch([Path("/src")], output_format="json")

        assert isinstance(run.call_args.args[3], JsonEventSink)

    def test_reads_settings_file(self, mocker: MockerFixture, tmp_path: Path) -> None:
        config = tmp_path / "wexstream.toml"
        _ = config.write_text('executable = "/from/file"\nflush_timeout = 0.5\n')
        run = mocker.patch("anyio.run")

        watch([Path("/src")], config=config)

        settings = cast("ClientSettings", run.call_args.args[2])
        assert settings.executable == "/from/file"
        assert settings.flush_timeout == 0.5

    def test_missing_settings_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            watch([Path("/src")], config=tmp_path / "missing.toml")

        assert exc_info.value.code == ExitCode.CONFIG_ERROR
        assert "Settings file not found" in capsys.readouterr().err

    def test_invalid_settings(self, tmp_path: Path) -> None:
        config = tmp_path / "wexstream.toml"
        _ = config.write_text("read_size = 0\n")

        with pytest.raises(SystemExit) as exc_info:
            watch([Path("/src")], config=config)

        assert exc_info.value.code == ExitCode.CONFIG_ERROR

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (
                TargetNotFoundError("Failed to start", executable="watchexec"),
                ExitCode.LAUNCH_ERROR,
            ),
            (
                InstanceExitedError("Watcher exited with code 1", exit_code=1),
                ExitCode.INSTANCE_EXITED,
            ),
            (
                UnexpectedOutputError("Unrecognized event line", output=b"x\n"),
                ExitCode.UNEXPECTED_OUTPUT,
            ),
            (KeyboardInterrupt(), ExitCode.INTERRUPTED),
        ],
    )
    def test_maps_errors_to_exit_codes(
        self, mocker: MockerFixture, error: BaseException, code: ExitCode
    ) -> None:
        _ = mocker.patch("anyio.run", side_effect=error)

        with pytest.raises(SystemExit) as exc_info:
            watch([Path("/src")])

        assert exc_info.value.code == code


class TestApp:
    def test_parses_repeated_options(self, mocker: MockerFixture) -> None:
        run = mocker.patch("anyio.run")
        buffer = io.StringIO()
        console = Console(file=buffer, color_system=None)
        app = create_app(console, console, exit_on_error=False)

        # Newer cyclopts releases exit after the command returns
        with contextlib.suppress(SystemExit):
            app(
                [
                    "watch",
                    "/a",
                    "/b",
                    "--filter",
                    "*.py",
                    "--filter",
                    "*.rs",
                    "--ignore",
                    "target/**",
                    "--format",
                    "json",
                ]
            )

        run.assert_called_once()
        configuration = cast("WatchConfiguration", run.call_args.args[1])
        assert configuration.watch_roots == ("/a", "/b")
        assert configuration.include_filters == ("*.py", "*.rs")
        assert configuration.exclude_filters == ("target/**",)
        assert isinstance(run.call_args.args[3], JsonEventSink)
