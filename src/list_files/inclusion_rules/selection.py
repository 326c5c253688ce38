"""Selection of the inclusion rule that governs a listing."""

import logging
from contextlib import contextmanager
from typing import Iterator

from list_files.exceptions import RepositoryNotFoundError, RepositoryOpenError
from list_files.git_ignore.ignore_evaluator import GitIgnoreEvaluator
from list_files.types import PathType

from .base_rules import BaseInclusionRule, IncludeAllRule
from .git_rules import GitIgnoreInclusionRule

logger = logging.getLogger(__name__)


@contextmanager
def select_inclusion_rule(root: PathType, use_ignore_rules: bool) -> Iterator[BaseInclusionRule]:
    """Choose the inclusion rule for a listing rooted at ``root``.

    Without ``use_ignore_rules`` every path is included. With it, the git repository
    enclosing ``root`` is opened and its ignore rules decide. Ignore filtering is best
    effort: if there is no repository, or it cannot be opened, the listing silently
    goes ahead with every path included.

    Any evaluator opened here is closed when the ``with`` block exits, however it exits.

    Args:
        root: Root directory of the listing.
        use_ignore_rules: Whether to filter by git ignore rules.

    Yields:
        The active inclusion rule.

    Example:
        >>> with select_inclusion_rule(".", use_ignore_rules=False) as rule:
        ...     rule.includes("build")
        True
    """
    if not use_ignore_rules:
        yield IncludeAllRule()
        return

    try:
        evaluator = GitIgnoreEvaluator(root)
    except (RepositoryNotFoundError, RepositoryOpenError) as e:
        logger.debug("Listing without ignore rules: %s", e)
        yield IncludeAllRule()
        return

    with evaluator:
        yield GitIgnoreInclusionRule(evaluator)
