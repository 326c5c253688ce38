"""Command-line argument parsing for list-files.

This module defines the command-line interface for list-files and turns parsed
arguments into run options.
"""

import argparse
from pathlib import Path

from list_files import __version__
from list_files.listing_error_action import ListingErrorAction
from list_files.options import Options

# CLI spelling of each listing error action
PERMISSION_ACTIONS = {
    "ignore": ListingErrorAction.IGNORE,
    "warn": ListingErrorAction.WARN,
    "fail": ListingErrorAction.RAISE,
}


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        An ArgumentParser instance configured with list-files' options.
    """
    description = """
    list-files: List files breadth first.

    Prints every entry below a directory, one per line, all entries of one level
    before any entry of the next. Each path is printed in whichever of its absolute
    or relative forms is shorter. Symbolic links are listed but never followed.
    """

    epilog = """
    Examples:
      # List everything below the current directory
      list-files

      # List only files, skipping anything ignored by git
      list-files -f -g /path/to/project

      # Stop on the first directory that cannot be read
      list-files -P fail /path/to/project
    """

    parser = argparse.ArgumentParser(
        prog="list-files",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"list-files {__version__}", help="Show the version and exit"
    )
    parser.add_argument(
        "directory",
        type=Path,
        nargs="?",
        default=Path("."),
        help="The directory to list files from (default: current directory).",
    )
    parser.add_argument(
        "-f",
        "--files",
        action="store_true",
        help="Only output files, not directories. Directories are still searched.",
    )
    parser.add_argument(
        "-g",
        "--gitignore",
        action="store_true",
        help=(
            "Skip files and folders ignored by git. Has no effect if the directory is not inside "
            "a git repository."
        ),
    )
    parser.add_argument(
        "-P",
        "--permission-action",
        choices=list(PERMISSION_ACTIONS),
        default="warn",
        help="How to handle directories that cannot be read (default: warn).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debugging information to stderr.",
    )

    return parser


def options_from_args(args: argparse.Namespace) -> Options:
    """Build run options from parsed command-line arguments."""
    return Options(
        directory=args.directory,
        files_only=args.files,
        use_ignore_rules=args.gitignore,
        listing_error_action=PERMISSION_ACTIONS[args.permission_action],
    )
