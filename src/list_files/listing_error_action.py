"""Listing error action enum for handling unreadable directories during traversal."""

from enum import Enum


class ListingErrorAction(str, Enum):
    """Action to take when a directory below the root cannot be listed.

    Values:
        IGNORE: Skip the directory's contents silently
        WARN: Skip the directory's contents and log a warning (default behavior)
        RAISE: Re-raise the underlying OSError and stop the traversal
    """

    IGNORE = "ignore"
    WARN = "warn"
    RAISE = "raise"
