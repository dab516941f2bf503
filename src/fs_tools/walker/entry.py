"""Immutable records produced by a directory walk."""

import errno
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from fs_tools.types import EntryKind, Verdict


def printable(text: str) -> str:
    """Render a filesystem name safely for text output.

    Names that are not valid UTF-8 reach Python with surrogate escapes, which
    cannot be written to a UTF-8 stream. Their raw bytes are shown as escapes.

    Example:
        >>> printable("x.rs")
        'x.rs'
        >>> print(printable(os.fsdecode(b"bad\\xff.txt")))
        bad\\xff.txt
    """
    return os.fsencode(text).decode("utf-8", "backslashreplace")


@dataclass(frozen=True)
class Entry:
    """One filesystem node discovered during a walk.

    Entries are snapshots taken at walk time; only the path is kept, never an
    open handle or a live stat object.

    Attributes:
        path: Absolute path of the node.
        relative_path: Path relative to the walk root, with forward slashes.
        kind: File, directory or (unfollowed) symlink.
        depth: Distance from the walk root; direct children of the root have depth 1.
        size: Size in bytes for files, None for other kinds.
        mtime: Modification time as seconds since the epoch.
        verdict: Filter decision for the entry. Walkers only yield included entries.
        link_target: Raw target of a symlink entry, if it could be read.

    Example:
        >>> entry = Entry(Path("/src/a/x.rs"), "a/x.rs", EntryKind.FILE, depth=2, size=12, mtime=0.0)
        >>> entry.name
        'x.rs'
        >>> entry.is_dir
        False
    """

    path: Path
    relative_path: str
    kind: EntryKind
    depth: int
    size: Optional[int] = None
    mtime: float = 0.0
    verdict: Verdict = Verdict.INCLUDED
    link_target: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


class ErrorKind(str, Enum):
    """Cause of a per-entry failure recorded during a walk or copy."""

    PERMISSION_DENIED = "permission denied"
    NOT_FOUND = "not found"
    IO_FAILURE = "io error"
    SYMLINK_CYCLE = "symlink cycle"


@dataclass(frozen=True)
class WalkError:
    """A failure attached to a single path.

    Attributes:
        path: The path that could not be read (or copied).
        kind: Classified cause.
        message: Human-readable detail, usually the OS error text.
    """

    path: Path
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{printable(str(self.path))}: {self.kind.value} ({self.message})"


def classify_error(error: OSError) -> ErrorKind:
    """Map an OSError onto the error kinds reported to users.

    Example:
        >>> classify_error(PermissionError(errno.EACCES, "Permission denied"))
        <ErrorKind.PERMISSION_DENIED: 'permission denied'>
        >>> classify_error(OSError(errno.ELOOP, "Too many levels of symbolic links"))
        <ErrorKind.SYMLINK_CYCLE: 'symlink cycle'>
        >>> classify_error(OSError(errno.ENOSPC, "No space left on device"))
        <ErrorKind.IO_FAILURE: 'io error'>
    """
    if isinstance(error, PermissionError):
        return ErrorKind.PERMISSION_DENIED
    if isinstance(error, FileNotFoundError):
        return ErrorKind.NOT_FOUND
    if error.errno == errno.ELOOP:
        return ErrorKind.SYMLINK_CYCLE
    return ErrorKind.IO_FAILURE


def error_for(path: Path, error: OSError) -> WalkError:
    """Build a WalkError for ``path`` from the exception raised while accessing it."""
    return WalkError(path, classify_error(error), error.strerror or str(error))
