"""
Whitespace trimming for text files.

Every line of a file loses its leading and trailing whitespace while the
whitespace between tokens is kept exactly as written. Files are rewritten
in place and the write is not atomic.
"""

from __future__ import annotations

import codecs
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from sonar_dev.errors import ConfigurationError, FileIOError
from sonar_dev.file_selector import FileSelection, FileSelector

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class TrimStatus(str, Enum):
    unchanged = "unchanged"
    rewritten = "rewritten"
    failed = "failed"


@dataclass(frozen=True)
class TrimResult:
    """Outcome of trimming one file. `error` is set only for `failed`."""

    path: Path
    status: TrimStatus
    error: str | None = None


def detect_newline(text: str) -> str:
    """Return the first line ending used in `text`, or `\\n` if it has none."""
    match = _LINE_BREAK.search(text)
    return match.group(0) if match else "\n"


def trim_text(text: str) -> str:
    """
    Strip leading and trailing whitespace from every line of `text`.

    Lines are rejoined with the text's own newline convention and each line,
    including the last, is terminated by it. Empty text stays empty.
    """
    if not text:
        return ""
    newline = detect_newline(text)
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    # str.strip() also removes Unicode whitespace such as NBSP and U+3000.
    return "".join(line.strip() + newline for line in lines)


def check_encoding(encoding: str) -> str:
    """Return `encoding` if Python knows it, else raise `ConfigurationError`."""
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ConfigurationError(f"Unknown encoding: {encoding}") from e
    return encoding


def trim_file(path: Path, encoding: str = DEFAULT_ENCODING, check: bool = False) -> TrimResult:
    """
    Trim one file in place. With `check=True` nothing is written.

    Raises `FileIOError` if the file cannot be read, decoded or written, and
    `ConfigurationError` for an unknown encoding.
    """
    check_encoding(encoding)
    try:
        with open(path, encoding=encoding, newline="") as f:
            original = f.read()
    except (OSError, UnicodeError) as e:
        raise FileIOError(f"Fail to read {path}: {e}", str(path)) from e

    trimmed = trim_text(original)
    if trimmed == original:
        logger.debug("Already trimmed: %s", path)
        return TrimResult(path, TrimStatus.unchanged)

    if check:
        logger.info("Would trim %s", path)
        return TrimResult(path, TrimStatus.rewritten)

    try:
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(trimmed)
    except (OSError, UnicodeError) as e:
        raise FileIOError(f"Fail to write {path}: {e}", str(path)) from e
    logger.info("Trimmed %s", path)
    return TrimResult(path, TrimStatus.rewritten)


def trim_files(
    paths: Iterable[Path],
    encoding: str = DEFAULT_ENCODING,
    check: bool = False,
    keep_going: bool = False,
) -> list[TrimResult]:
    """
    Trim each file in turn.

    The first failure aborts the run by re-raising its `FileIOError`, unless
    `keep_going` is set, in which case it is recorded as a `failed` result.
    """
    check_encoding(encoding)
    results: list[TrimResult] = []
    for path in paths:
        try:
            results.append(trim_file(path, encoding=encoding, check=check))
        except FileIOError as e:
            if not keep_going:
                raise
            logger.error("%s", e)
            results.append(TrimResult(path, TrimStatus.failed, str(e)))
    return results


def trim_directory(
    selection: FileSelection,
    encoding: str = DEFAULT_ENCODING,
    check: bool = False,
    keep_going: bool = False,
) -> list[TrimResult]:
    """Trim every file selected by `selection`."""
    check_encoding(encoding)
    files = FileSelector(selection).select()
    return trim_files(files, encoding=encoding, check=check, keep_going=keep_going)
