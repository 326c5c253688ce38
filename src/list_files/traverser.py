"""Breadth-first traversal of a directory tree.

This module provides the BreadthFirstTraverser class, which walks a directory tree
level by level and yields every entry admitted by an inclusion rule.
"""

import logging
import os
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Deque, Iterator, List, Optional, Union

from list_files.inclusion_rules.base_rules import BaseInclusionRule, IncludeAllRule
from list_files.listing_error_action import ListingErrorAction
from list_files.types import PathType

logger = logging.getLogger(__name__)


class TraversalState(str, Enum):
    """Lifecycle of a single traversal.

    Values:
        PENDING: Not started yet
        RUNNING: Entries are being yielded
        COMPLETED: Every admitted entry has been yielded
        FAILED: The traversal stopped on an error
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class BreadthFirstTraverser:
    """Walks a directory tree in breadth-first order.

    All entries at depth N are yielded before any entry at depth N + 1. Siblings come
    out in the order the operating system lists them; they are not sorted.

    Every candidate path is shown to the inclusion rule exactly once, before it is
    queued. A rejected directory is neither yielded nor expanded, so nothing below it
    appears either. The root is checked once before the walk starts and is never
    yielded itself.

    Symbolic Link Behavior:
        Symbolic links are yielded like any other entry but never expanded, whatever
        they point to. Since links are the only way a directory tree can contain a
        cycle, no other loop detection is needed and each entry is yielded at most once.

    Listing Errors:
        If the root itself cannot be listed the error always propagates. For directories
        below the root, listing_error_action decides:
        - IGNORE: Skip the directory's contents silently
        - WARN (default): Skip the directory's contents and log a warning
        - RAISE: Propagate the OSError

    Attributes:
        root (Path): Root directory of the traversal, exactly as given.
        inclusion_rule (BaseInclusionRule): Decides which paths are admitted.
        files_only (bool): Whether directories are left out of the yielded paths.
        listing_error_action (ListingErrorAction): How to handle unreadable directories.
        state (TraversalState): Where the traversal is in its lifecycle.

    Example:
        >>> traverser = BreadthFirstTraverser("project")  # doctest: +SKIP
        >>> for path in traverser.iterate_paths():  # doctest: +SKIP
        ...     print(path)
        project/README.md
        project/src
        project/src/main.py
    """

    def __init__(
        self,
        root: PathType,
        inclusion_rule: Optional[BaseInclusionRule] = None,
        *,
        files_only: bool = False,
        listing_error_action: Union[str, ListingErrorAction] = ListingErrorAction.WARN,
    ) -> None:
        """Initialize a BreadthFirstTraverser.

        Args:
            root: Directory to traverse. Yielded paths are built on top of it, so a relative
                root gives relative paths.
            inclusion_rule: Rule deciding which paths are admitted. Defaults to IncludeAllRule.
            files_only: Leave directories out of the yielded paths. Their contents are still
                traversed. Defaults to False.
            listing_error_action: How to handle directories below the root that cannot be
                listed. Either "ignore", "warn" or "raise", or a ListingErrorAction value.
                Defaults to WARN.

        Raises:
            ValueError: If listing_error_action is not a valid action.
        """
        if isinstance(listing_error_action, str):
            try:
                listing_error_action = ListingErrorAction(listing_error_action.lower())
            except ValueError:
                raise ValueError(
                    f"Invalid listing_error_action: {listing_error_action}. "
                    "Must be one of: 'ignore', 'warn', 'raise'"
                )

        self.root = Path(root)
        self.inclusion_rule = inclusion_rule if inclusion_rule is not None else IncludeAllRule()
        self.files_only = files_only
        self.listing_error_action = listing_error_action
        self.state = TraversalState.PENDING

    def iterate_paths(self) -> Iterator[Path]:
        """Yield every admitted path below the root in breadth-first order.

        A traverser can only be iterated once. Closing the generator before it is exhausted
        leaves the traversal in the FAILED state.

        Yields:
            Paths of admitted entries, built by joining entry names onto the root.

        Raises:
            RuntimeError: If the traverser has already been started.
            FileNotFoundError: If the root does not exist.
            OSError: If the root cannot be listed, or a directory below it cannot be listed
                and listing_error_action is RAISE.
            IgnoreEvaluationError: If a git-backed inclusion rule fails to evaluate a path.
        """
        if self.state is not TraversalState.PENDING:
            raise RuntimeError(f"Traversal of {self.root} has already been started")
        self.state = TraversalState.RUNNING

        completed = False
        try:
            yield from self._traverse()
            completed = True
        finally:
            # Errors and abandoned walks (the generator closed early) both end as FAILED
            self.state = TraversalState.COMPLETED if completed else TraversalState.FAILED

    def _traverse(self) -> Iterator[Path]:
        if not os.path.lexists(self.root):
            raise FileNotFoundError(f"Root path does not exist: {self.root}")

        if not self.inclusion_rule.includes(self.root):
            logger.debug("Root %s is excluded, nothing to list", self.root)
            return

        frontier: Deque[Path] = deque([self.root])
        is_root = True
        while frontier:
            path = frontier.popleft()

            if not is_root and not (self.files_only and path.is_dir()):
                yield path

            if not path.is_symlink() and path.is_dir():
                for child in self._list_directory(path, is_root):
                    if self.inclusion_rule.includes(child):
                        frontier.append(child)
            is_root = False

    def _list_directory(self, directory: Path, is_root: bool) -> List[Path]:
        """List the immediate entries of a directory in the order the OS returns them."""
        try:
            with os.scandir(directory) as entries:
                return [Path(entry.path) for entry in entries]
        except OSError as e:
            if is_root or self.listing_error_action == ListingErrorAction.RAISE:
                raise
            if self.listing_error_action == ListingErrorAction.WARN:
                logger.warning("Skipping contents of %s: %s", directory, e.strerror or e)
            return []
