"""Configuration types for file selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from sonar_dev.file_selector.defaults import DEFAULT_EXCLUDES, DEFAULT_INCLUDES


@dataclass
class FileSelection:
    """
    A root directory plus ANT include and exclude patterns relative to it.

    A file is selected if it matches at least one include pattern and no
    exclude pattern. An empty `includes` list selects every file.
    `default_excludes=True` adds `DEFAULT_EXCLUDES` to `excludes`.
    """

    root: Path
    includes: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)
    default_excludes: bool = False

    @property
    def effective_includes(self) -> list[str]:
        """Include patterns, or `DEFAULT_INCLUDES` when none are given."""
        patterns = [p for p in self.includes if p.strip()]
        return patterns if patterns else list(DEFAULT_INCLUDES)

    @property
    def effective_excludes(self) -> list[str]:
        """Exclude patterns, extended with `DEFAULT_EXCLUDES` when enabled."""
        base = list(DEFAULT_EXCLUDES) if self.default_excludes else []
        return base + [p for p in self.excludes if p.strip()]
