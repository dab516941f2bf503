"""File identifier for uniquely identifying directories by device and inode."""

import os
from typing import Any


class FileIdentifier:
    """Identity of a filesystem object, independent of the path used to reach it.

    Two different path strings (for instance a directory and a symlink pointing at
    it) resolve to the same identifier. The walker keeps the identifiers of the
    directories on the current descent path to detect symlink cycles.

    Attributes:
        device_id (int): The device ID from stat information.
        inode_number (int): The inode number from stat information.

    Example:
        >>> FileIdentifier(1, 42) == FileIdentifier(1, 42)
        True
        >>> FileIdentifier(1, 42) == FileIdentifier(2, 42)
        False
    """

    def __init__(self, device_id: int, inode_number: int):
        self.device_id = device_id
        self.inode_number = inode_number

    @classmethod
    def from_stat(cls, stat_result: os.stat_result) -> "FileIdentifier":
        """Build an identifier from a stat result.

        Note:
            On Windows, st_ino is provided by Python's os.stat implementation and is
            stable enough for cycle detection on NTFS volumes.
        """
        return cls(stat_result.st_dev, stat_result.st_ino)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FileIdentifier):
            return False
        return self.device_id == other.device_id and self.inode_number == other.inode_number

    def __hash__(self) -> int:
        return hash((self.device_id, self.inode_number))

    def __repr__(self) -> str:
        return f"FileIdentifier(device_id={self.device_id}, inode_number={self.inode_number})"
