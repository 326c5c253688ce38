"""Discovery of the git repository enclosing a directory."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from list_files.exceptions import RepositoryNotFoundError, RepositoryOpenError

logger = logging.getLogger(__name__)

GITDIR_PREFIX = "gitdir:"


@dataclass(frozen=True)
class RepositoryLocation:
    """Where a repository keeps its working tree and its metadata.

    Attributes:
        work_tree: Canonical path of the top-level working directory.
        git_dir: Canonical path of the metadata directory (usually ``work_tree/.git``).
    """

    work_tree: Path
    git_dir: Path


def discover_repository(start: Path) -> RepositoryLocation:
    """Find the repository whose working tree contains ``start``.

    Walks from ``start`` towards the filesystem root and stops at the first directory
    holding a ``.git`` entry. A ``.git`` directory is used as-is. A ``.git`` file, as
    created for worktrees and submodules, must contain a ``gitdir:`` line pointing at
    the real metadata directory.

    Args:
        start: Canonical (absolute, symlink-free) directory to search from.

    Returns:
        The location of the enclosing repository.

    Raises:
        RepositoryNotFoundError: If no directory at or above ``start`` has a ``.git`` entry.
        RepositoryOpenError: If a ``.git`` file exists but cannot be read or does not
            point at a directory.
    """
    for candidate in (start, *start.parents):
        dot_git = candidate / ".git"
        if dot_git.is_dir():
            logger.debug("Found git repository at %s", candidate)
            return RepositoryLocation(work_tree=candidate, git_dir=dot_git)
        if dot_git.is_file():
            git_dir = _read_gitdir_file(dot_git)
            logger.debug("Found git repository at %s (metadata in %s)", candidate, git_dir)
            return RepositoryLocation(work_tree=candidate, git_dir=git_dir)
    raise RepositoryNotFoundError(start)


def _read_gitdir_file(dot_git: Path) -> Path:
    try:
        content = dot_git.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RepositoryOpenError(dot_git, f"Could not read gitdir file ({e})") from e

    for line in content.splitlines():
        if line.startswith(GITDIR_PREFIX):
            target = Path(line[len(GITDIR_PREFIX) :].strip())
            if not target.is_absolute():
                target = dot_git.parent / target
            target = Path(os.path.realpath(target))
            if not target.is_dir():
                raise RepositoryOpenError(target, "gitdir does not point to a directory")
            return target

    raise RepositoryOpenError(dot_git, "Malformed gitdir file")
