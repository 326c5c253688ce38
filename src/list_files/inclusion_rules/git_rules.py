"""Inclusion rule backed by a git repository's ignore rules."""

from list_files.git_ignore.ignore_evaluator import GitIgnoreEvaluator
from list_files.types import PathType

from .base_rules import BaseInclusionRule


class GitIgnoreInclusionRule(BaseInclusionRule):
    """Admits paths that are not ignored by the enclosing git repository.

    The rule does not own the evaluator; whoever opened it is responsible for closing it.

    Attributes:
        evaluator (GitIgnoreEvaluator): The open evaluator answering ignore queries.
    """

    def __init__(self, evaluator: GitIgnoreEvaluator) -> None:
        self.evaluator = evaluator

    def includes(self, path: PathType) -> bool:
        """Check a path against the repository's ignore rules.

        Raises:
            IgnoreEvaluationError: If the ignore check itself fails. This is never turned
                into a yes or no answer.
        """
        return not self.evaluator.is_ignored(path)
