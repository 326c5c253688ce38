"""Signal handling utilities for the list-files CLI.

This module records SIGPIPE and SIGINT so the CLI can stop writing, clean up and
exit with the conventional status instead of printing a traceback.
"""

import atexit
import os
import signal
import sys
from threading import Event
from types import FrameType
from typing import Optional

# SIGPIPE does not exist on Windows
HAS_SIGPIPE = hasattr(signal, "SIGPIPE")


class SignalHandler:
    """Records interrupting signals for the rest of the CLI to act on.

    Each handler fires once: it sets its event and restores the original handler, so a
    second signal of the same kind gets the default behavior.

    Attributes:
        sigpipe_received: Event that is set when a SIGPIPE signal is received.
        sigint_received: Event that is set when a SIGINT signal is received.
        original_sigpipe_handler: SIGPIPE handler in place before setup, or None without SIGPIPE.
        original_sigint_handler: SIGINT handler in place before setup.
    """

    def __init__(self) -> None:
        self.sigpipe_received = Event()
        self.sigint_received = Event()
        self.original_sigpipe_handler = signal.getsignal(signal.SIGPIPE) if HAS_SIGPIPE else None
        self.original_sigint_handler = signal.getsignal(signal.SIGINT)

    @property
    def interrupted(self) -> bool:
        """Whether either signal has been received."""
        return self.sigpipe_received.is_set() or self.sigint_received.is_set()

    def handle_sigpipe(self, signum: int, frame: Optional[FrameType]) -> None:
        self.sigpipe_received.set()
        signal.signal(signal.SIGPIPE, self.original_sigpipe_handler)

    def handle_sigint(self, signum: int, frame: Optional[FrameType]) -> None:
        self.sigint_received.set()
        signal.signal(signal.SIGINT, self.original_sigint_handler)

    def exit_code(self) -> Optional[int]:
        """Exit status owed to a received signal, or None if there was none."""
        if self.sigpipe_received.is_set():
            return 141
        if self.sigint_received.is_set():
            return 130
        return None


# Create a singleton instance for the application
signal_handler = SignalHandler()


def setup_signal_handling() -> None:
    """Install the handlers for SIGPIPE (where available) and SIGINT."""
    if HAS_SIGPIPE:
        signal.signal(signal.SIGPIPE, signal_handler.handle_sigpipe)
    signal.signal(signal.SIGINT, signal_handler.handle_sigint)


def cleanup() -> None:
    """Point stdout at the null device after an interruption.

    This keeps the interpreter from reporting a broken pipe while flushing stdout on
    shutdown.
    """
    if signal_handler.interrupted:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


atexit.register(cleanup)
