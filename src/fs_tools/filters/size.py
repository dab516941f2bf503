"""Human-readable file size parsing and formatting."""

from typing import Union

from humanfriendly import InvalidSize, format_size, parse_size

from fs_tools.exceptions import ConfigError


def parse_file_size(size: Union[str, int]) -> int:
    """Parse a human-readable file size to bytes.

    Args:
        size: Size string like '1GB', '500MB', '2.5K', a bare number of bytes,
            or an integer.

    Returns:
        Size in bytes.

    Raises:
        ConfigError: If the value is not a valid, non-negative size.

    Example:
        >>> parse_file_size("1KB")
        1000
        >>> parse_file_size("1KiB")
        1024
        >>> parse_file_size(512)
        512
    """
    if isinstance(size, int):
        if size < 0:
            raise ConfigError("Size cannot be negative")
        return size

    try:
        num_bytes = int(parse_size(size))
    except (InvalidSize, ValueError) as e:
        raise ConfigError(f"Invalid size format '{size}': {e}")
    if num_bytes < 0:
        raise ConfigError("Size cannot be negative")
    return num_bytes


def describe_size(num_bytes: int) -> str:
    """Format a byte count for summaries.

    Example:
        >>> describe_size(0)
        '0 bytes'
        >>> describe_size(1500)
        '1.5 KB'
    """
    return str(format_size(num_bytes))
