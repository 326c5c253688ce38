"""Buffered, signal-aware output for the list-files CLI."""

import errno
import os
import types
from typing import List, Optional, Type

from list_files.cli.signal_handler import signal_handler

# Flush once this many bytes are pending
DEFAULT_BUFFER_SIZE = 64 * 1024


class SafeWriter:
    """Writes text to a file descriptor, stopping cleanly on SIGPIPE or SIGINT.

    Output is collected in memory and written in chunks of about ``buffer_size`` bytes.
    Anything still pending is written when the writer is closed.

    Attributes:
        fd: File descriptor being written to. The writer never closes it.
        buffer_size: Number of pending bytes that triggers a flush.

    Example:
        >>> import sys
        >>> with SafeWriter(sys.stdout.fileno()) as writer:  # doctest: +SKIP
        ...     writer.write("src/main.py\\n")
        src/main.py
    """

    def __init__(self, fd: int, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if not isinstance(fd, int):
            raise TypeError(f"Expected a file descriptor, got {type(fd).__name__}")
        if buffer_size < 1:
            raise ValueError("buffer_size must be positive")
        self.fd = fd
        self.buffer_size = buffer_size
        self._pending: List[bytes] = []
        self._pending_size = 0
        self._closed = False

    def write(self, data: str) -> None:
        """Queue text for output, flushing if the buffer is full.

        Raises:
            BrokenPipeError: If SIGPIPE or SIGINT was received, or the pipe is closed.
            OSError: If another I/O error occurs while flushing.
            ValueError: If the writer is closed.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")
        if signal_handler.interrupted:
            raise BrokenPipeError()

        encoded = data.encode("utf-8", errors="surrogateescape")
        self._pending.append(encoded)
        self._pending_size += len(encoded)
        if self._pending_size >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write out everything pending.

        Raises:
            BrokenPipeError: If the reading end of the pipe has gone away.
        """
        data = b"".join(self._pending)
        self._pending = []
        self._pending_size = 0
        try:
            while data:
                written = os.write(self.fd, data)
                data = data[written:]
        except OSError as e:
            if e.errno == errno.EPIPE:
                raise BrokenPipeError() from e
            raise

    def close(self) -> None:
        """Flush pending output and mark the writer closed.

        Pending output is dropped instead of written if a signal was received. The writer
        is marked closed even if the final flush fails.
        """
        if self._closed:
            return
        try:
            if signal_handler.interrupted:
                self._pending = []
                self._pending_size = 0
            else:
                self.flush()
        finally:
            self._closed = True

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        """Close the writer, letting an exception from the block win over one from closing."""
        try:
            self.close()
        except OSError:
            if exc_type is None:
                raise
