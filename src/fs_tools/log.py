"""Structured logging setup using structlog.

Library modules obtain their loggers with ``structlog.get_logger(__name__)`` and
emit key-value events; the command-line interface calls ``configure_logging``
once to decide how verbose those events are and where they are rendered.
"""

import logging
import sys
from typing import Any

import structlog

QUIET = -1
NORMAL = 0
VERBOSE = 1

_LEVELS = {
    QUIET: logging.ERROR,
    NORMAL: logging.WARNING,
    VERBOSE: logging.DEBUG,
}


def level_for(verbosity: int) -> int:
    """Map a CLI verbosity value to a logging level.

    Args:
        verbosity: QUIET, NORMAL or VERBOSE. Values outside that range are clamped.

    Returns:
        The standard logging level used to filter events.

    Example:
        >>> level_for(QUIET) == logging.ERROR
        True
        >>> level_for(5) == logging.DEBUG
        True
    """
    return _LEVELS[max(QUIET, min(VERBOSE, verbosity))]


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Looked up per logger so a replaced sys.stderr is honoured
    return structlog.PrintLogger(sys.stderr)


def configure_logging(verbosity: int = NORMAL) -> None:
    """Configure structlog with console output on stderr.

    Args:
        verbosity: QUIET shows only errors, NORMAL adds warnings, VERBOSE shows
            every event including per-entry debug messages.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_for(verbosity)),
        context_class=dict,
        logger_factory=_stderr_logger,
        # The CLI may be invoked repeatedly in one process (tests), each time with new streams.
        cache_logger_on_first_use=False,
    )
