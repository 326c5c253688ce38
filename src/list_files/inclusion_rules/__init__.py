"""Inclusion rules deciding which paths a listing admits."""

from .base_rules import BaseInclusionRule, IncludeAllRule
from .git_rules import GitIgnoreInclusionRule
from .selection import select_inclusion_rule

__all__ = [
    "BaseInclusionRule",
    "GitIgnoreInclusionRule",
    "IncludeAllRule",
    "select_inclusion_rule",
]
