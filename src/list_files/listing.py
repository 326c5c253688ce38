"""Breadth-first listing of a directory as output lines.

This module ties the pieces together: it selects the inclusion rule for a run,
drives the traversal and renders every yielded path for output.
"""

from typing import Iterator, Optional

from list_files.inclusion_rules.selection import select_inclusion_rule
from list_files.options import Options
from list_files.path_formatter import format_path
from list_files.traverser import BreadthFirstTraverser
from list_files.types import PathType


def stream_listing(options: Options, base: Optional[PathType] = None) -> Iterator[str]:
    """Generate the listing for ``options`` one line at a time.

    The git repository used for ignore filtering, if any, stays open while the generator
    is being consumed and is closed when it finishes, fails or is closed early.

    Args:
        options: Settings for the run.
        base: Reference directory for relative renderings. Defaults to the current
            working directory.

    Yields:
        One rendered path per admitted entry, each ending in a newline.

    Raises:
        FileNotFoundError: If the root directory does not exist.
        OSError: If a directory cannot be listed and the listing error action requires it.
        IgnoreEvaluationError: If ignore filtering is active and a path cannot be evaluated.

    Example:
        >>> for line in stream_listing(Options(directory=Path("src"))):  # doctest: +SKIP
        ...     print(line, end="")
        src/list_files
        src/list_files/__init__.py
    """
    with select_inclusion_rule(options.directory, options.use_ignore_rules) as inclusion_rule:
        traverser = BreadthFirstTraverser(
            options.directory,
            inclusion_rule,
            files_only=options.files_only,
            listing_error_action=options.listing_error_action,
        )
        for path in traverser.iterate_paths():
            yield format_path(path, base) + "\n"
