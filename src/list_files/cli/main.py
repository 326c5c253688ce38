"""Command-line interface for list-files.

This module provides the ``list-files`` entry point, which prints the entries below
a directory in breadth-first order. It handles argument parsing, logging setup,
output writing and signal management for graceful interruption handling.

Signal Handling Notes:
    - SIGPIPE: Handled when output pipe is closed (e.g., when piping to `head`) on Unix-like systems
    - SIGINT: Handled for clean exit on Ctrl+C
    Both stop the listing, close the git repository if one was opened and exit with the
    conventional status.

Exit Codes:
    0: Successful completion, including when -g/--gitignore found no repository
    1: Runtime error during execution (missing directory, failed ignore check, unreadable directory)
    2: Command-line syntax error
    126: Permission denied while listing and --permission-action is fail, or listing the root
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    # List files only, honoring .gitignore
    $ list-files -f -g /path/to/project
"""

import logging
import sys
from contextlib import closing

from list_files.cli.argparser import create_parser, options_from_args
from list_files.cli.safe_writer import SafeWriter
from list_files.cli.signal_handler import setup_signal_handling, signal_handler
from list_files.listing import stream_listing

LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr, at DEBUG level when verbose and WARNING otherwise."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)


def main() -> None:
    """Main entry point for the list-files command-line interface.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Command-line syntax error
        126: Permission denied
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE) on Unix-like systems
    """
    setup_signal_handling()

    # argparse exits with status 2 on usage errors and 0 for --help/--version
    args = create_parser().parse_args()
    configure_logging(args.verbose)

    try:
        options = options_from_args(args)
        with SafeWriter(sys.stdout.fileno()) as safe_writer:
            try:
                with closing(stream_listing(options)) as lines:
                    for line in lines:
                        safe_writer.write(line)
            except BrokenPipeError:
                pass  # SafeWriter will discard pending output in the context manager
    except PermissionError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(126)
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    exit_code = signal_handler.exit_code()
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
