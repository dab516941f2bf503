"""Signal handling utilities for the fs-tools CLI.

SIGINT does not raise KeyboardInterrupt while the handlers are installed; it
sets a flag that long-running work polls at entry boundaries, so a copy stops
between two files instead of in the middle of one. SIGPIPE (Unix only) marks
the output as gone so that writers stop quietly.
"""

import atexit
import os
import signal
import sys
from threading import Event
from types import FrameType
from typing import Any, Dict, Optional

HAS_SIGPIPE = hasattr(signal, "SIGPIPE")


class SignalHandler:
    """Records SIGINT and SIGPIPE for the duration of one CLI run.

    Handlers are installed with ``install`` and the previous ones put back with
    ``restore``. A second SIGINT during the same run reaches the previous
    handler, so a user can still force an immediate stop.

    Attributes:
        sigpipe_received: Event that is set when a SIGPIPE signal is received.
        sigint_received: Event that is set when a SIGINT signal is received.
    """

    def __init__(self) -> None:
        self.sigpipe_received = Event()
        self.sigint_received = Event()
        self._previous: Dict[int, Any] = {}

    def install(self) -> None:
        """Clear received signals and take over SIGINT (and SIGPIPE where available)."""
        self.reset()
        self._take(signal.SIGINT, self.handle_sigint)
        if HAS_SIGPIPE:
            self._take(signal.SIGPIPE, self.handle_sigpipe)

    def restore(self) -> None:
        """Put back every handler replaced by ``install``."""
        while self._previous:
            signum, previous = self._previous.popitem()
            signal.signal(signum, previous)

    def handle_sigpipe(self, signum: int, frame: Optional[FrameType]) -> None:
        self.sigpipe_received.set()
        self._release(signum)

    def handle_sigint(self, signum: int, frame: Optional[FrameType]) -> None:
        self.sigint_received.set()
        self._release(signum)

    def stop_requested(self) -> bool:
        """Whether work should end at the next entry boundary."""
        return self.sigint_received.is_set()

    def output_closed(self) -> bool:
        """Whether the reader of stdout has gone away."""
        return self.sigpipe_received.is_set()

    def interrupted(self) -> bool:
        """Return True once SIGINT or SIGPIPE has been received."""
        return self.stop_requested() or self.output_closed()

    def reset(self) -> None:
        """Clear received signals before a new run."""
        self.sigpipe_received.clear()
        self.sigint_received.clear()

    def _take(self, signum: int, handler: Any) -> None:
        previous = signal.signal(signum, handler)
        self._previous.setdefault(signum, previous)

    def _release(self, signum: int) -> None:
        if signum in self._previous:
            signal.signal(signum, self._previous.pop(signum))


# Create a singleton instance for the application
signal_handler = SignalHandler()


def setup_signal_handling() -> None:
    """Install the fs-tools handlers on the shared SignalHandler."""
    signal_handler.install()


def restore_signal_handling() -> None:
    """Reinstall the handlers that were active before setup_signal_handling."""
    signal_handler.restore()


def cleanup() -> None:
    """Cleanup function registered with atexit.

    Redirects stdout to the null device if we received SIGPIPE or SIGINT to prevent
    additional error messages during shutdown.
    """
    if signal_handler.interrupted():
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


atexit.register(cleanup)
