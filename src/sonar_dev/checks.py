"""Existence checks shared by the upload and trim commands."""

from __future__ import annotations

from pathlib import Path

from sonar_dev.errors import ConfigurationError


def require_dir(path: Path, message: str) -> Path:
    """Return `path` if it is an existing directory, else raise `ConfigurationError`."""
    if not path.is_dir():
        raise ConfigurationError(f"{message}: {path.absolute()}")
    return path


def require_file(path: Path, message: str) -> Path:
    """Return `path` if it is an existing regular file, else raise `ConfigurationError`."""
    if not path.is_file():
        raise ConfigurationError(f"{message}: {path.absolute()}")
    return path
