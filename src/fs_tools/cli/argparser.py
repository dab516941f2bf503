"""Command-line argument parsing for fs-tools.

This module defines the ``display`` and ``copy`` subcommands and the options
they share, and validates the parsed arguments.
"""

import argparse
from pathlib import Path
from typing import Optional, TypeVar

from fs_tools import __version__

T = TypeVar("T")


def non_negative_int(value: str) -> int:
    """argparse type accepting integers >= 0."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or greater: {value!r}")
    return number


def _filter_options() -> argparse.ArgumentParser:
    """Options shared by every subcommand: filtering, traversal and verbosity."""
    parent = argparse.ArgumentParser(add_help=False)

    filters = parent.add_argument_group("filtering")
    filters.add_argument(
        "-e",
        "--exclude",
        action="append",
        metavar="PATTERN",
        help=(
            "Regular expression; any entry whose path relative to the root matches it is excluded, and "
            "excluded directories are not descended. Can be specified multiple times. Exclusion always "
            "wins over inclusion."
        ),
    )
    filters.add_argument(
        "-i",
        "--include",
        action="append",
        metavar="PATTERN",
        help=(
            "Regular expression a file's relative path must match to be kept. Directories are kept as "
            "long as they contain something. Can be specified multiple times."
        ),
    )
    filters.add_argument(
        "--ext",
        action="append",
        metavar="EXT",
        help="Only keep files with these extensions (comma-separated, repeatable).",
    )
    filters.add_argument(
        "--exclude-ext",
        action="append",
        metavar="EXT",
        help="Drop files with these extensions (comma-separated, repeatable). Cannot be combined with --ext.",
    )
    filters.add_argument(
        "--ignore-file",
        action="append",
        type=Path,
        metavar="FILE",
        help="Exclude paths matched by the gitignore-style patterns in FILE (repeatable).",
    )
    filters.add_argument(
        "--max-size",
        metavar="SIZE",
        help="Exclude files larger than SIZE (e.g. 500KB, 2MiB, 1024).",
    )

    traversal = parent.add_argument_group("traversal")
    traversal.add_argument(
        "--depth",
        type=non_negative_int,
        metavar="N",
        help="Descend at most N levels below the root (children of the root are level 1).",
    )
    traversal.add_argument(
        "--show-empty",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Keep directories that are empty after filtering.",
    )
    traversal.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        help="Follow symbolic links. By default links are listed (and copied) as links.",
    )
    traversal.add_argument(
        "--no-hidden",
        action="store_true",
        help="Skip files and directories whose names start with a dot. They are included by default.",
    )

    general = parent.add_argument_group("general")
    general.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="Configuration file to use instead of ./fs-tools.toml or ./.fs-tools.toml.",
    )
    verbosity = general.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only report errors; the final error summary is always shown."
    )
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Report every entry as it is processed."
    )
    return parent


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        An ArgumentParser instance with the ``display`` and ``copy`` subcommands.
    """
    description = """
    fs-tools: visualize directory trees and copy filtered directory structures.

    Both subcommands share one traversal engine: entries are visited depth-first in
    name order, regular-expression filters are matched against each entry's path
    relative to the root (forward slashes), excluded directories are pruned, and
    directories left empty by filtering are hidden unless --show-empty is given.
    Unreadable paths are reported at the end without stopping the run.
    """

    epilog = """
    Configuration file (fs-tools.toml in the current directory):
      [display]
      show_empty_folders = false
      max_depth = 3

      [filters]
      exclude = ["\\\\.log$", "(^|/)target$"]

      [copy]
      preserve_timestamps = true
      overwrite = false

    Command-line options override the configuration file.

    Examples:
      # Show the tree of the current directory
      fs-tools display

      # Hide log files and anything under node_modules, two levels deep
      fs-tools display -e '\\.log$' -e 'node_modules' --depth 2 src

      # Copy only Rust sources, keeping timestamps
      fs-tools copy -i '\\.rs$' --preserve project backup

      # See what a copy would do without writing anything
      fs-tools copy --dry-run -v project backup

    Exit codes:
      0    success
      1    some entries failed, or a runtime error occurred
      2    invalid command line or configuration
      130  interrupted by SIGINT (Ctrl+C)
      141  broken pipe (SIGPIPE)
    """

    parser = argparse.ArgumentParser(
        prog="fs-tools",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"fs-tools {__version__}", help="Show the version and exit"
    )

    parent = _filter_options()
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    display = subparsers.add_parser(
        "display",
        parents=[parent],
        help="Print a directory tree.",
        description="Print the filtered directory tree rooted at PATH.",
    )
    display.add_argument("path", nargs="?", type=Path, default=Path("."), help="Directory to display (default: .).")
    display.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Write the tree to FILE instead of stdout.",
    )
    display.add_argument(
        "-s",
        "--summary",
        action="store_true",
        help="Print directory, file and symlink counts after the tree.",
    )

    copy = subparsers.add_parser(
        "copy",
        parents=[parent],
        help="Copy a filtered directory structure.",
        description="Copy the filtered contents of SOURCE into DESTINATION, preserving the directory structure.",
    )
    copy.add_argument("source", type=Path, help="Directory to copy from.")
    copy.add_argument("destination", type=Path, help="Directory to copy into (created if missing).")
    copy.add_argument(
        "--preserve",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Preserve modification times and permission bits.",
    )
    copy.add_argument(
        "--overwrite",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Replace files that already exist in the destination.",
    )
    copy.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Report what would be copied without changing anything.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.ext and args.exclude_ext:
        raise ValueError("--ext and --exclude-ext cannot be combined")
    if args.command == "copy" and args.source == args.destination:
        raise ValueError("source and destination must differ")


def verbosity_of(args: argparse.Namespace) -> int:
    """Return -1 for --quiet, 1 for --verbose and 0 otherwise."""
    if args.quiet:
        return -1
    if args.verbose:
        return 1
    return 0


def pick(cli_value: Optional[T], file_value: Optional[T], default: T) -> T:
    """Resolve one setting: the command line wins over the file, the file over the default.

    Example:
        >>> pick(None, True, False)
        True
        >>> pick(False, True, False)
        False
        >>> pick(None, None, 3)
        3
    """
    if cli_value is not None:
        return cli_value
    if file_value is not None:
        return file_value
    return default
