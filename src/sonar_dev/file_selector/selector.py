"""
FileSelector: lazily walks a root directory and yields the files selected
by a `FileSelection`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pathspec

from sonar_dev.errors import FileIOError
from sonar_dev.file_selector.patterns import compile_patterns
from sonar_dev.file_selector.types import FileSelection

logger = logging.getLogger(__name__)


class FileSelector:
    """
    Selects regular files under a root directory by ANT include/exclude patterns.

    Results come in directory traversal order and are not sorted.
    """

    def __init__(self, selection: FileSelection) -> None:
        self._selection: FileSelection = selection
        self._include_spec: pathspec.PathSpec = compile_patterns(selection.effective_includes)
        self._exclude_spec: pathspec.PathSpec = compile_patterns(selection.effective_excludes)

    @property
    def root(self) -> Path:
        return self._selection.root

    def matches(self, rel_path: str) -> bool:
        """Check a root-relative path against the include and exclude patterns."""
        if not self._include_spec.match_file(rel_path):
            return False
        return not self._exclude_spec.match_file(rel_path)

    def select(self) -> Iterator[Path]:
        """
        Return a lazy iterator over the selected files.

        Raises `FileIOError` immediately if the root is missing, is not a
        directory, or is not readable. Directories that cannot be listed
        during the walk raise `FileIOError` when reached.
        """
        root = self._selection.root
        if not root.exists():
            raise FileIOError(f"Directory does not exist: {root.absolute()}", str(root))
        if not root.is_dir():
            raise FileIOError(f"Not a directory: {root.absolute()}", str(root))
        if not os.access(root, os.R_OK | os.X_OK):
            raise FileIOError(f"Directory is not readable: {root.absolute()}", str(root))
        return self._walk(root)

    def _walk(self, root: Path) -> Iterator[Path]:
        for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            current = Path(dirpath)
            for filename in filenames:
                filepath = current / filename
                rel_path = filepath.relative_to(root).as_posix()
                if not self.matches(rel_path):
                    continue
                # Skip sockets, fifos and dangling symlinks.
                if not filepath.is_file():
                    logger.debug("Skipping non-regular file %s", filepath)
                    continue
                yield filepath


def _raise_walk_error(error: OSError) -> None:
    raise FileIOError(f"Cannot list directory {error.filename}: {error.strerror}", error.filename)
