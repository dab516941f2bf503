from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class EntryKind(str, Enum):
    """Enumeration of filesystem node kinds discovered during traversal.

    Attributes:
        FILE: Regular file (or a followed symlink to one)
        DIRECTORY: Directory (or a followed symlink to one)
        SYMLINK: Symbolic link that is not followed
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


class Verdict(str, Enum):
    """Filter decision attached to a path by the pattern matcher."""

    INCLUDED = "included"
    EXCLUDED = "excluded"
