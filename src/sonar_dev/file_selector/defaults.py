"""
Default include and exclude patterns for file selection.

These patterns use ANT syntax and are relative to the selection root.
"""

from __future__ import annotations

# No include patterns means every file under the root.
DEFAULT_INCLUDES: list[str] = ["**"]

# Editor droppings and version-control metadata, as skipped by ANT's
# directory scanner. Only applied when `default_excludes` is enabled.
DEFAULT_EXCLUDES: list[str] = [
    # Editors
    "**/*~",
    "**/#*#",
    "**/.#*",
    "**/%*%",
    "**/._*",
    "**/.DS_Store",
    # CVS
    "**/CVS/",
    "**/.cvsignore",
    # Subversion
    "**/.svn/",
    # Git
    "**/.git/",
    "**/.gitignore",
    "**/.gitattributes",
    # Mercurial
    "**/.hg/",
    "**/.hgignore",
    "**/.hgtags",
    # Bazaar
    "**/.bzr/",
    "**/.bzrignore",
]
