"""
File selection by ANT-style include and exclude patterns.

Usage::

    from sonar_dev.file_selector import FileSelection, FileSelector

    selection = FileSelection(
        root=Path("src/main/resources"),
        includes=["**/*.txt"],
        excludes=["**/generated/**"],
    )
    for path in FileSelector(selection).select():
        ...
"""

from sonar_dev.file_selector.defaults import DEFAULT_EXCLUDES, DEFAULT_INCLUDES
from sonar_dev.file_selector.patterns import AntPattern, compile_pattern, compile_patterns
from sonar_dev.file_selector.selector import FileSelector
from sonar_dev.file_selector.types import FileSelection

__all__ = [
    "DEFAULT_EXCLUDES",
    "DEFAULT_INCLUDES",
    "AntPattern",
    "FileSelection",
    "FileSelector",
    "compile_pattern",
    "compile_patterns",
]
