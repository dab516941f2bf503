"""Filtered directory traversal producing immutable entries.

This package provides the walker shared by the tree renderer and the copy
executor, together with the entry and error records it produces.
"""

from .entry import Entry, ErrorKind, WalkError, classify_error, printable
from .file_identifier import FileIdentifier
from .walker import DirectoryWalker, WalkResult, walk

__all__ = [
    "DirectoryWalker",
    "Entry",
    "ErrorKind",
    "FileIdentifier",
    "WalkError",
    "WalkResult",
    "classify_error",
    "printable",
    "walk",
]
