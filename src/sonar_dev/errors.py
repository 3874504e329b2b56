"""Error types for sonar-dev commands."""

from __future__ import annotations


class SonarDevError(Exception):
    """Base class for all errors reported by sonar-dev commands."""


class ConfigurationError(SonarDevError):
    """
    A required directory, file or setting is missing or invalid.

    Always raised before any side effect takes place.
    """


class FileIOError(SonarDevError):
    """Reading, writing or copying a file failed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path: str | None = path


class RemoteError(SonarDevError):
    """The server answered with an unexpected status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code: int | None = status_code
