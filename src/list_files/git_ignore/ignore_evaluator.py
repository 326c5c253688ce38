"""Evaluation of git ignore rules against paths inside a repository working tree."""

import configparser
import logging
import os
import stat
import types
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Type

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from list_files.exceptions import IgnoreEvaluationError, RepositoryOpenError
from list_files.git_ignore.repository import RepositoryLocation, discover_repository
from list_files.types import PathType

logger = logging.getLogger(__name__)

# Name of the metadata directory, which git always treats as ignored
GIT_METADATA_DIR = ".git"

# Regex group pathspec uses for the "/" that ends a matched directory
DIRECTORY_MARK = "ps_d"

PathParts = Tuple[str, ...]


class GitIgnoreEvaluator:
    """Answers whether paths are excluded by the ignore rules of a git repository.

    The evaluator opens the repository enclosing ``root_path`` when it is constructed
    and holds it until :meth:`close` is called. It is a context manager, so the usual
    way to use it is::

        with GitIgnoreEvaluator("src") as evaluator:
            evaluator.is_ignored("src/build")

    Rules are gathered the way git gathers them, from lowest to highest precedence:

    - the global excludes file (``core.excludesFile``, or ``$XDG_CONFIG_HOME/git/ignore``)
    - ``$GIT_DIR/info/exclude``
    - every ``.gitignore`` from the top of the working tree down to the directory
      containing the path

    The last matching pattern wins, so ``!pattern`` lines re-include earlier matches.
    A path inside an ignored directory is always ignored, and ``.git`` itself is always
    ignored. The pattern syntax itself is handled by ``pathspec``.

    Per-directory ``.gitignore`` files are read lazily and cached for as long as the
    evaluator is open, so changes made to them during a listing are not picked up.

    Attributes:
        location (RepositoryLocation): Working tree and metadata directory of the repository.

    Example:
        >>> GitIgnoreEvaluator("/")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        list_files.exceptions.RepositoryNotFoundError: No git repository found at or above: /
    """

    def __init__(self, root_path: PathType) -> None:
        """Open the repository enclosing ``root_path``.

        Args:
            root_path: A directory inside the working tree of the repository to open.

        Raises:
            RepositoryNotFoundError: If there is no repository at or above ``root_path``.
            RepositoryOpenError: If ``root_path`` does not exist or the repository metadata
                cannot be read.
        """
        self._closed = False
        self._base_specs: List[PathSpec] = []
        self._gitignore_specs: Dict[PathParts, Optional[PathSpec]] = {}
        self._directory_results: Dict[PathParts, bool] = {}

        try:
            try:
                root = Path(root_path).resolve(strict=True)
            except (OSError, RuntimeError) as e:
                raise RepositoryOpenError(root_path, f"Could not resolve path ({e})") from e
            if not root.is_dir():
                root = root.parent

            self.location: RepositoryLocation = discover_repository(root)

            excludes_file = self._global_excludes_file()
            for rules_file in (excludes_file, self.location.git_dir / "info" / "exclude"):
                if rules_file is None:
                    continue
                try:
                    spec = _load_spec(rules_file)
                except OSError as e:
                    raise RepositoryOpenError(rules_file, f"Could not read exclude file ({e})") from e
                if spec is not None:
                    self._base_specs.append(spec)
        except BaseException:
            self.close()
            raise

    @classmethod
    def open(cls, root_path: PathType) -> "GitIgnoreEvaluator":
        """Open the repository enclosing ``root_path``. Equivalent to calling the constructor."""
        return cls(root_path)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the repository. Calling this more than once has no further effect."""
        if self._closed:
            return
        self._closed = True
        self._base_specs = []
        self._gitignore_specs.clear()
        self._directory_results.clear()
        logger.debug("Closed git ignore evaluator")

    def __enter__(self) -> "GitIgnoreEvaluator":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        self.close()

    def __copy__(self) -> "GitIgnoreEvaluator":
        raise TypeError(f"{self.__class__.__name__} cannot be copied")

    def __deepcopy__(self, memo: Dict[int, object]) -> "GitIgnoreEvaluator":
        raise TypeError(f"{self.__class__.__name__} cannot be copied")

    def is_ignored(self, path: PathType) -> bool:
        """Check whether a path is excluded by the repository's ignore rules.

        The path is canonicalized before matching. Only its parent directory is resolved,
        so a symbolic link is judged by where the link itself lives, not by its target.

        Args:
            path: The file or directory to check.

        Returns:
            bool: True if the path, or any directory containing it, matches an ignore rule.
                The top of the working tree itself is never ignored.

        Raises:
            IgnoreEvaluationError: If the evaluator is closed, the path lies outside the
                working tree, or the path or a ``.gitignore`` file cannot be read.
        """
        if self._closed:
            raise IgnoreEvaluationError(path, "Ignore evaluator is closed")

        parts, is_dir = self._canonical_parts(path)
        if not parts:
            return False
        if GIT_METADATA_DIR in parts:
            return True

        # A path cannot be re-included once one of its parent directories is ignored
        for depth in range(1, len(parts)):
            if self._is_directory_ignored(parts[:depth]):
                return True

        if is_dir:
            return self._is_directory_ignored(parts)
        return self._matches(parts, is_dir=False)

    def _canonical_parts(self, path: PathType) -> Tuple[PathParts, bool]:
        parent, name = os.path.split(os.path.abspath(path))
        try:
            canonical = Path(parent).resolve() / name if name else Path(parent).resolve()
            is_dir = stat.S_ISDIR(os.lstat(canonical).st_mode)
        except (OSError, RuntimeError) as e:
            raise IgnoreEvaluationError(path, f"Could not resolve path ({e})") from e

        try:
            relative = canonical.relative_to(self.location.work_tree)
        except ValueError as e:
            # A symlink leading into the work tree, e.g. a root given through a link
            resolved = Path(os.path.realpath(canonical))
            try:
                relative = resolved.relative_to(self.location.work_tree)
            except ValueError:
                raise IgnoreEvaluationError(path, "Path is outside the repository working tree") from e
            is_dir = resolved.is_dir()
        return relative.parts, is_dir

    def _is_directory_ignored(self, parts: PathParts) -> bool:
        result = self._directory_results.get(parts)
        if result is None:
            result = self._matches(parts, is_dir=True)
            self._directory_results[parts] = result
        return result

    def _matches(self, parts: PathParts, is_dir: bool) -> bool:
        ignored = False
        for base, spec in self._specs_for(parts[:-1]):
            candidate = "/".join(parts[len(base) :])
            if is_dir:
                # Lets directory-only patterns such as "build/" match
                candidate += "/"
            for pattern in spec.patterns:
                if pattern.include is not None and _matches_itself(pattern, candidate):
                    ignored = pattern.include
        return ignored

    def _specs_for(self, directory: PathParts) -> Iterator[Tuple[PathParts, PathSpec]]:
        """Yield (base directory, spec) pairs that apply to entries of ``directory``, lowest precedence first."""
        for spec in self._base_specs:
            yield (), spec
        for depth in range(len(directory) + 1):
            base = directory[:depth]
            spec = self._gitignore_spec(base)
            if spec is not None:
                yield base, spec

    def _gitignore_spec(self, directory: PathParts) -> Optional[PathSpec]:
        if directory not in self._gitignore_specs:
            gitignore = self.location.work_tree.joinpath(*directory, ".gitignore")
            try:
                self._gitignore_specs[directory] = _load_spec(gitignore)
            except OSError as e:
                raise IgnoreEvaluationError(gitignore, f"Could not read ignore file ({e})") from e
        return self._gitignore_specs[directory]

    def _global_excludes_file(self) -> Optional[Path]:
        """Locate the user's global excludes file.

        ``core.excludesFile`` is taken from the repository config first, then from
        ``~/.gitconfig``. Without it git falls back to ``$XDG_CONFIG_HOME/git/ignore``.
        """
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as e:
            raise RepositoryOpenError(self.location.work_tree, f"Could not determine home directory ({e})") from e

        for config_file in (self.location.git_dir / "config", home / ".gitconfig"):
            configured = _read_core_excludes_file(config_file)
            if configured is not None:
                return Path(os.path.expanduser(configured))

        xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
        config_home = Path(xdg_config_home) if xdg_config_home else home / ".config"
        return config_home / "git" / "ignore"


def _matches_itself(pattern: GitWildMatchPattern, candidate: str) -> bool:
    """Check whether a pattern matches ``candidate`` itself rather than a directory above it.

    pathspec compiles patterns so they also match everything below a matching directory,
    capturing the separator after that directory in the ``ps_d`` group. Entries below an
    ignored directory are already handled by the ancestor check in ``is_ignored``, so a
    match counts only when that group is absent or is the trailing slash of a directory
    candidate.
    """
    match = pattern.regex.match(candidate)
    if match is None:
        return False
    if DIRECTORY_MARK not in pattern.regex.groupindex:
        return True
    mark = match.start(DIRECTORY_MARK)
    return mark == -1 or (candidate.endswith("/") and mark == len(candidate) - 1)


def _load_spec(rules_file: Path) -> Optional[PathSpec]:
    """Compile the patterns of an ignore file, or return None if the file does not exist."""
    try:
        with open(rules_file, "r", encoding="utf-8", errors="surrogateescape") as f:
            lines = f.read().splitlines()
    except FileNotFoundError:
        return None
    logger.debug("Loaded %d ignore patterns from %s", len(lines), rules_file)
    return PathSpec.from_lines(GitWildMatchPattern, lines)


def _read_core_excludes_file(config_file: Path) -> Optional[str]:
    if not config_file.is_file():
        return None

    # Git config is close enough to INI for the [core] section
    parser = configparser.ConfigParser(strict=False, interpolation=None, allow_no_value=True)
    try:
        parser.read(config_file, encoding="utf-8")
    except (configparser.Error, OSError, UnicodeDecodeError) as e:
        raise RepositoryOpenError(config_file, f"Could not read git config ({e})") from e
    value = parser.get("core", "excludesfile", fallback=None)
    if value:
        return value.strip().strip('"')
    return None
