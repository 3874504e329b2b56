"""
ANT-style glob patterns for `pathspec`.

Supported syntax, always matched against `/`-separated paths relative to
the selection root:

- `*` matches any run of characters within one path segment
- `?` matches exactly one character within one path segment
- `**` as a whole segment matches zero or more segments
- a trailing `/` is shorthand for `/**`
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import pathspec
from pathspec.pattern import RegexPattern


def _translate_segment(segment: str) -> str:
    """Translate one path segment (no `/`) into a regex fragment."""
    out: list[str] = []
    for char in segment:
        if char == "*":
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        else:
            out.append(re.escape(char))
    return "".join(out)


def compile_pattern(pattern: str) -> str | None:
    """
    Convert an ANT pattern into an anchored regular expression string.

    Returns `None` for a blank pattern.
    """
    pattern = pattern.strip().replace("\\", "/")
    if not pattern:
        return None
    if pattern.endswith("/"):
        pattern += "**"

    # Drop empty segments (leading `/`, `//`) and collapse runs of `**`.
    segments: list[str] = []
    for segment in pattern.split("/"):
        if not segment or (segment == "**" and segments and segments[-1] == "**"):
            continue
        segments.append(segment)

    parts: list[str] = []
    last = len(segments) - 1
    for i, segment in enumerate(segments):
        if segment != "**":
            parts.append(_translate_segment(segment))
            if i < last:
                parts.append("/")
        elif i == 0 and i == last:
            parts.append(".*")
        elif i == last:
            # `dir/**` also matches `dir` itself.
            parts[-1] = "(?:/.*)?"
        else:
            parts.append("(?:[^/]+/)*")
    return "^" + "".join(parts) + "$"


class AntPattern(RegexPattern):
    """A `pathspec` pattern compiled from ANT glob syntax. Patterns never negate."""

    @classmethod
    def pattern_to_regex(cls, pattern: str) -> tuple[str | None, bool | None]:  # pyright: ignore[reportIncompatibleMethodOverride]
        if not isinstance(pattern, str):
            raise TypeError(f"ANT pattern must be a string: {pattern!r}")
        regex = compile_pattern(pattern)
        if regex is None:
            return None, None
        return regex, True


def compile_patterns(patterns: Iterable[str]) -> pathspec.PathSpec:
    """Compile ANT patterns into a `PathSpec` that matches if any pattern matches."""
    return pathspec.PathSpec.from_lines(AntPattern, patterns)
