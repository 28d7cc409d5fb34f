"""wexstream settings.

This module provides the public API for settings management: typed
models plus loading from a TOML file and WEXSTREAM_* environment variables.

Example:
    >>> from wexstream.config import load_settings
    >>> settings = load_settings()
    >>> settings.executable
    'watchexec'
"""

from wexstream.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._loader import (
    ENV_PREFIX,
    deep_merge,
    load_settings,
    parse_env_vars,
    read_toml_file,
    set_nested_key,
)
from ._models import ClientSettings, LogFormat, LoggingSettings, LogLevel

__all__ = [
    "ENV_PREFIX",
    "ClientSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingSettings",
    "deep_merge",
    "load_settings",
    "parse_env_vars",
    "read_toml_file",
    "set_nested_key",
]
