"""Rendering of listed paths for output."""

import os
from pathlib import Path
from typing import Optional

from list_files.types import PathType


def format_path(path: PathType, base: Optional[PathType] = None) -> str:
    """Render a path using the shorter of its absolute and relative spellings.

    The relative spelling is the proximate path from ``base`` (the current working
    directory by default), using ``..`` segments where needed. When both spellings
    have the same length the absolute one is used.

    Args:
        path: The path to render.
        base: Reference directory for the relative spelling. Defaults to the current
            working directory.

    Returns:
        The chosen rendering.

    Example:
        >>> format_path("/usr/lib/python3", base="/usr/lib")
        'python3'
        >>> format_path("/usr", base="/home/someone/projects")
        '/usr'
    """
    absolute = str(Path(path).absolute())
    if base is None:
        base = os.getcwd()
    try:
        proximate = os.path.relpath(absolute, base)
    except ValueError:
        # No relative form exists, e.g. paths on different drives on Windows
        proximate = absolute

    if len(absolute) <= len(proximate):
        return absolute
    return proximate
