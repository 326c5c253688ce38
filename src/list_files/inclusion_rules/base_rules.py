from abc import ABC, abstractmethod

from list_files.types import PathType


class BaseInclusionRule(ABC):
    """
    Abstract base class defining the interface for deciding which paths a listing admits.

    A traversal holds exactly one inclusion rule and asks it about every candidate path
    once, before the path is queued. Implementations decide what "included" means, e.g.
    everything, or everything not ignored by git.

    Example:
        >>> class NoHiddenRule(BaseInclusionRule):
        ...     def includes(self, path):
        ...         from pathlib import Path
        ...         return not Path(path).name.startswith(".")
        >>> rule = NoHiddenRule()
        >>> rule.includes("src/main.py")
        True
        >>> rule.includes("src/.cache")
        False
    """

    @abstractmethod
    def includes(self, path: PathType) -> bool:
        """
        Determine whether a path should be part of the listing.

        Args:
            path: The file or directory path to check, as produced by the traversal.

        Returns:
            bool: True if the path is admitted, False if it (and everything below it) is skipped.
        """
        pass


class IncludeAllRule(BaseInclusionRule):
    """Inclusion rule that admits every path.

    Example:
        >>> IncludeAllRule().includes("anything/at/all")
        True
    """

    def includes(self, path: PathType) -> bool:
        return True
