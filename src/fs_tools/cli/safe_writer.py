"""Safe output writing utilities for the fs-tools CLI.

This module provides a writing interface that stops cleanly when the reader of
the output goes away or the user interrupts the program.
"""

import errno
import os
import types
from pathlib import Path
from typing import Optional, TextIO, Type, Union

from fs_tools.cli.signal_handler import signal_handler
from fs_tools.types import PathType


class SafeWriter:
    """Signal-aware writer for tree text and summaries.

    Output goes either to an already open text stream (normally ``sys.stdout``)
    or to a file that the writer opens and closes itself.

    Attributes:
        target: The stream or path given at construction.
        interruptible: Whether SIGINT stops writing. A broken pipe always does.
    """

    def __init__(self, target: Union[TextIO, PathType], interruptible: bool = True):
        """Initialize the safe writer.

        Args:
            target: An open text stream, or a path to a file to create.
            interruptible: Stop writing after SIGINT. Final summaries pass False so
                they still appear after Ctrl+C.

        Raises:
            TypeError: If target is neither a stream nor a path.
        """
        self.target = target
        self.interruptible = interruptible
        self._closed = False
        self._owned = False

        if isinstance(target, (str, os.PathLike)):
            self._stream: TextIO = Path(target).open("w", encoding="utf-8")
            self._owned = True
        elif hasattr(target, "write"):
            self._stream = target
        else:
            raise TypeError(f"Expected a text stream, str, or PathLike, got {type(target).__name__}")

    def write(self, data: str) -> None:
        """Write data unless the output has gone away.

        Raises:
            BrokenPipeError: If SIGPIPE (or, when interruptible, SIGINT) was received, or the
                pipe is broken.
            OSError: If another I/O error occurs during writing.
            ValueError: If attempting to write to a closed writer.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        if signal_handler.output_closed() or (self.interruptible and signal_handler.stop_requested()):
            raise BrokenPipeError()

        try:
            self._stream.write(data)
            self._stream.flush()
        except OSError as e:
            if e.errno == errno.EPIPE:
                raise BrokenPipeError()
            raise

    def write_line(self, line: str) -> None:
        self.write(line + "\n")

    def close(self) -> None:
        """Close the stream if this writer opened it.

        The writer is marked closed even if closing fails with a broken pipe.
        """
        if self._closed:
            return

        if self._owned:
            try:
                self._stream.close()
            except OSError as e:
                if e.errno != errno.EPIPE:
                    raise

        self._closed = True

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        try:
            self.close()
        except OSError:
            # If there was already an exception, prioritize it
            if exc_type is None:
                raise
