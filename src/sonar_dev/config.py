"""
TOML and environment configuration for sonar-dev.

Searches for `.sonar-dev.toml`, `sonar-dev.toml`, or `pyproject.toml
[tool.sonar-dev]` walking up from the current directory. Values may also come
from `SONAR_DEV_*` environment variables. Precedence is: explicit CLI flags >
environment > config file > built-in defaults.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, TypeVar, cast

from sonar_dev.errors import ConfigurationError

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

TOOL_NAME = "sonar-dev"


@dataclass
class SonarDevConfig:
    """
    Settings from a config file or the environment. Fields are `None` when
    not set, so merging can tell "not configured" from "set to the default".
    """

    # Upload
    server_home: str | None = None
    server_url: str | None = None
    timeout: float | None = None
    # Trim
    includes: list[str] | None = None
    excludes: list[str] | None = None
    encoding: str | None = None
    default_excludes: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [f".{TOOL_NAME}.toml", f"{TOOL_NAME}.toml", "pyproject.toml"]

_ENV_VARS: dict[str, str] = {
    "SONAR_DEV_SERVER_HOME": "server_home",
    "SONAR_DEV_SERVER_URL": "server_url",
    "SONAR_DEV_TIMEOUT": "timeout",
}

_VALID_FIELDS = {f.name for f in fields(SonarDevConfig)}

_STR_FIELDS = {"server_home", "server_url", "encoding"}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Search order per
    directory: `.sonar-dev.toml` > `sonar-dev.toml` > `pyproject.toml` (only
    if it has `[tool.sonar-dev]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_tool_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_tool_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return TOOL_NAME in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> SonarDevConfig:
    """
    Load a `SonarDevConfig` from a TOML file. `[upload]` and `[trim]` sections
    are flattened and kebab-case keys are mapped to snake_case.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except (tomllib.TOMLDecodeError, OSError) as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get(TOOL_NAME, {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> SonarDevConfig:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = _check_value(key, snake_key, value)

    return SonarDevConfig(**mapped)


def _check_value(key: str, name: str, value: Any) -> Any:
    """Check a config file value against the type of its `SonarDevConfig` field."""
    if name in _STR_FIELDS:
        if not isinstance(value, str):
            raise ConfigurationError(f"`{key}` must be a string, got {value!r}")
        return value
    if name == "timeout":
        # bool is an int subclass, but `timeout = true` is a mistake.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(f"`{key}` must be a number of seconds, got {value!r}")
        return float(value)
    if name == "default_excludes":
        if not isinstance(value, bool):
            raise ConfigurationError(f"`{key}` must be true or false, got {value!r}")
        return value
    # includes / excludes
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(
        isinstance(item, str) for item in cast(list[Any], value)
    ):
        raise ConfigurationError(f"`{key}` must be a string or a list of strings, got {value!r}")
    return value


def load_env_config(environ: Mapping[str, str] | None = None) -> SonarDevConfig:
    """Read the `SONAR_DEV_*` environment variables."""
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    for var, name in _ENV_VARS.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        if name == "timeout":
            try:
                values[name] = float(raw)
            except ValueError as e:
                raise ConfigurationError(f"{var} must be a number of seconds: {raw!r}") from e
        else:
            values[name] = raw
    return SonarDevConfig(**values)


def combine_configs(base: SonarDevConfig, override: SonarDevConfig) -> SonarDevConfig:
    """Return `base` with every field that is set in `override` replaced."""
    changes = {
        f.name: getattr(override, f.name)
        for f in fields(SonarDevConfig)
        if getattr(override, f.name) is not None
    }
    return replace(base, **changes)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: SonarDevConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Fill options not explicitly given on the command line from `config`.
    Only attributes that exist on `cli_opts` are touched.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(SonarDevConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
