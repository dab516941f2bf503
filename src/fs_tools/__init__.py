"""Directory tree display and filtered, structure-preserving copy utilities.

This package provides a filtered directory walker shared by two front-ends:
a tree renderer that prints directory structures and a copy executor that
replicates the filtered structure into another location.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("fs-tools")
except PackageNotFoundError:
    __version__ = "unknown"
