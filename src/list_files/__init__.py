"""Breadth-first directory listing utilities.

This package lists the entries below a root directory level by level,
optionally skipping anything excluded by the enclosing git repository's
ignore rules.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("list-files")
except PackageNotFoundError:
    __version__ = "unknown"
