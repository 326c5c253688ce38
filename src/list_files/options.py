"""Run configuration for a single listing."""

from dataclasses import dataclass
from pathlib import Path

from list_files.listing_error_action import ListingErrorAction


@dataclass(frozen=True)
class Options:
    """Immutable settings for one breadth-first listing.

    Attributes:
        directory: Root of the traversal.
        files_only: Suppress directory entries from the output. Directories are still traversed.
        use_ignore_rules: Skip entries ignored by the enclosing git repository, when there is one.
        listing_error_action: What to do when a directory below the root cannot be listed.
    """

    directory: Path = Path(".")
    files_only: bool = False
    use_ignore_rules: bool = False
    listing_error_action: ListingErrorAction = ListingErrorAction.WARN
