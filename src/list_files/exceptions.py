from typing import Optional

from list_files.types import PathType


class IgnoreEvaluatorError(Exception):
    """
    Base class for errors raised while opening or querying a git ignore evaluator.

    Attributes:
        path (str): The path that was being opened or evaluated.

    Example:
        >>> error = IgnoreEvaluatorError("/repo/file.txt", "Something went wrong")
        >>> str(error)
        'Something went wrong: /repo/file.txt'
    """

    default_message = "Ignore evaluator error"

    def __init__(self, path: PathType, message: Optional[str] = None) -> None:
        self.path = str(path)
        super().__init__(f"{message or self.default_message}: {self.path}")


class RepositoryNotFoundError(IgnoreEvaluatorError):
    """
    Exception raised when no git repository exists at or above a path.

    Example:
        >>> str(RepositoryNotFoundError("/tmp/project"))
        'No git repository found at or above: /tmp/project'
    """

    default_message = "No git repository found at or above"


class RepositoryOpenError(IgnoreEvaluatorError):
    """
    Exception raised when a git repository was found but could not be opened.

    This covers malformed ``.git`` files, unreadable exclude files and any other
    failure that is not simply the absence of a repository.
    """

    default_message = "Could not open git repository"


class IgnoreEvaluationError(IgnoreEvaluatorError):
    """
    Exception raised when checking a path against the ignore rules fails.

    This is distinct from a path simply not being ignored. It means no trustworthy
    answer could be produced, so a listing that relies on it has to stop.

    Example:
        >>> str(IgnoreEvaluationError("/elsewhere/file.txt", "Path is outside the repository"))
        'Path is outside the repository: /elsewhere/file.txt'
    """

    default_message = "Gitignore check failed"
