# pyright: reportAny=false, reportUnknownArgumentType=false
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from wexstream.config import (
    ClientSettings,
    ConfigLoadError,
    ConfigValidationError,
    LogFormat,
    LogLevel,
    deep_merge,
    load_settings,
    parse_env_vars,
    read_toml_file,
    set_nested_key,
)
from wexstream.config._loader import _parse_env_value

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in list(os.environ):
        if key.startswith("WEXSTREAM_"):
            monkeypatch.delenv(key)
    return monkeypatch


class TestReadTomlFile:
    def test_parses_valid_toml(self, fs: FakeFilesystem) -> None:
        path = Path("/etc/wexstream.toml")
        fs.create_file(path, contents='executable = "/opt/watchexec"\n')

        assert read_toml_file(path) == {"executable": "/opt/watchexec"}

    def test_raises_file_not_found_for_missing_file(self, fs: FakeFilesystem) -> None:
        with pytest.raises(FileNotFoundError):
            _ = read_toml_file(Path("/etc/missing.toml"))

    def test_config_load_error_includes_location(self, fs: FakeFilesystem) -> None:
        path = Path("/etc/bad.toml")
        fs.create_file(path, contents='executable = "x"\n\n[logging\n')

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        error = exc_info.value
        assert error.path == path
        assert error.line == 3
        assert error.column is not None
        assert "TOMLDecodeError" in type(error.__cause__).__name__


class TestDeepMerge:
    def test_nested_values_are_merged(self) -> None:
        base = {"logging": {"level": "info", "format": "text"}, "read_size": 10}
        override = {"logging": {"level": "debug"}}

        assert deep_merge(base, override) == {
            "logging": {"level": "debug", "format": "text"},
            "read_size": 10,
        }

    def test_inputs_are_not_modified(self) -> None:
        base = {"logging": {"level": "info"}}
        override = {"logging": {"level": "debug"}}
        base_copy = copy.deepcopy(base)
        override_copy = copy.deepcopy(override)

        _ = deep_merge(base, override)

        assert base == base_copy
        assert override == override_copy

    def test_scalar_replaces_table(self) -> None:
        assert deep_merge({"logging": {"level": "info"}}, {"logging": 1}) == {
            "logging": 1
        }


class TestSetNestedKey:
    def test_creates_intermediate_tables(self) -> None:
        d: dict[str, object] = {}
        set_nested_key(d, "logging.level", "debug")
        assert d == {"logging": {"level": "debug"}}

    def test_replaces_non_table_intermediate(self) -> None:
        d: dict[str, object] = {"logging": "oops"}
        set_nested_key(d, "logging.level", "debug")
        assert d == {"logging": {"level": "debug"}}


class TestParseEnvValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("8080", 8080),
            ("0.25", 0.25),
            ('["a", "b"]', ["a", "b"]),
            ("watchexec", "watchexec"),
            ("1.2.3", "1.2.3"),
        ],
    )
    def test_infers_types(self, raw: str, expected: object) -> None:
        assert _parse_env_value(raw) == expected


class TestParseEnvVars:
    def test_nested_keys_use_double_underscore(
        self, clean_env: pytest.MonkeyPatch
    ) -> None:
        clean_env.setenv("WEXSTREAM_LOGGING__LEVEL", "debug")
        clean_env.setenv("WEXSTREAM_FLUSH_TIMEOUT", "0.5")
        clean_env.setenv("OTHER_KEY", "ignored")

        assert parse_env_vars() == {
            "logging": {"level": "debug"},
            "flush_timeout": 0.5,
        }

    def test_bare_prefix_is_ignored(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("WEXSTREAM_", "value")
        assert parse_env_vars() == {}


class TestLoadSettings:
    def test_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        settings = load_settings()
        assert settings == ClientSettings()
        assert settings.executable == "watchexec"
        assert settings.logging.level is LogLevel.WARNING
        assert settings.logging.format is LogFormat.TEXT

    def test_file_env_and_overrides_precedence(
        self, fs: FakeFilesystem, clean_env: pytest.MonkeyPatch
    ) -> None:
        path = Path("/etc/wexstream.toml")
        fs.create_file(
            path,
            contents=(
                'executable = "/from/file"\n'
                "read_size = 1024\n"
                "[logging]\n"
                'level = "info"\n'
            ),
        )
        clean_env.setenv("WEXSTREAM_READ_SIZE", "2048")
        clean_env.setenv("WEXSTREAM_LOGGING__FORMAT", "json")

        settings = load_settings(path, overrides={"executable": "/from/flag"})

        assert settings.executable == "/from/flag"
        assert settings.read_size == 2048
        assert settings.logging.level is LogLevel.INFO
        assert settings.logging.format is LogFormat.JSON

    def test_env_can_be_disabled(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("WEXSTREAM_EXECUTABLE", "/from/env")
        assert load_settings(include_env=False).executable == "watchexec"

    def test_unknown_keys_are_ignored(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("WEXSTREAM_DEBUG", "1")
        assert load_settings() == ClientSettings()

    def test_validation_error_names_key(
        self, fs: FakeFilesystem, clean_env: pytest.MonkeyPatch
    ) -> None:
        path = Path("/etc/wexstream.toml")
        fs.create_file(path, contents="flush_timeout = -1\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            _ = load_settings(path)

        error = exc_info.value
        assert error.key == "flush_timeout"
        assert error.value == -1
        assert error.expected == "greater_than_equal"
        assert error.source == str(path)

    def test_nested_validation_error(self, clean_env: pytest.MonkeyPatch) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = load_settings(overrides={"logging": {"level": "loud"}})

        assert exc_info.value.key == "logging.level"
        assert exc_info.value.source is None
