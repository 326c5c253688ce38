"""Git repository discovery and ignore-rule evaluation."""

from .ignore_evaluator import GitIgnoreEvaluator
from .repository import RepositoryLocation, discover_repository

__all__ = [
    "GitIgnoreEvaluator",
    "RepositoryLocation",
    "discover_repository",
]
