"""Command-line interface for fs-tools.

This module provides the ``fs-tools`` entry point with two subcommands:
``display`` prints a filtered directory tree and ``copy`` replicates a filtered
directory structure elsewhere. It merges command-line options with the optional
project configuration file, manages output, and maps results to exit codes.

Signal Handling Notes:
    - SIGPIPE: output stops quietly when the reading end of a pipe closes (Unix)
    - SIGINT: a copy stops at the next entry boundary; output stops immediately

Exit Codes:
    0: Successful completion
    1: Some entries failed (permission, missing, I/O), or a runtime error occurred
    2: Command-line syntax error or rejected configuration
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    # Display a tree without log files
    $ fs-tools display -e '\\.log$' /path/to/dir

    # Copy Rust sources only, preserving timestamps
    $ fs-tools copy -i '\\.rs$' --preserve /path/to/src /path/to/dst
"""

import argparse
import sys
from collections.abc import Iterable, Mapping
from typing import List, Optional, Sequence

from fs_tools.cli.argparser import create_parser, pick, validate_args, verbosity_of
from fs_tools.cli.safe_writer import SafeWriter
from fs_tools.cli.signal_handler import restore_signal_handling, setup_signal_handling, signal_handler
from fs_tools.config import CopyConfig, FileConfig, WalkConfig, load_project_config
from fs_tools.copier.copy_executor import CopyExecutor
from fs_tools.copier.outcome import CopyReport
from fs_tools.exceptions import ConfigError
from fs_tools.filters.filter_rule import FilterRule
from fs_tools.filters.size import describe_size
from fs_tools.log import VERBOSE, configure_logging
from fs_tools.render.tree_renderer import count_entries, root_display_name, stream_tree
from fs_tools.walker.entry import WalkError
from fs_tools.walker.walker import walk

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_USAGE = 2
EXIT_SIGINT = 130
EXIT_SIGPIPE = 141


def format_counts(counts: Mapping[str, int]) -> str:
    """Format display counts into a human-readable string.

    Example:
        >>> print(format_counts({"directories": 2, "files": 5, "symlinks": 0}))
        Directories: 2
        Files: 5
        Symlinks: 0
    """
    return "\n".join(
        [
            f"Directories: {counts['directories']}",
            f"Files: {counts['files']}",
            f"Symlinks: {counts['symlinks']}",
        ]
    )


def format_copy_summary(report: CopyReport, verbose: bool = False) -> str:
    """Format the summary printed after a copy run.

    Args:
        report: The finished copy report.
        verbose: Add one line per processed entry before the totals.

    Returns:
        The summary text without a trailing newline.
    """
    lines: List[str] = []
    if verbose:
        lines.extend(result.describe() for result in report.results)
        if lines:
            lines.append("")

    counts = report.counts()
    title = "Dry run (nothing was written)" if report.dry_run else "Copy complete"
    if report.interrupted:
        title = "Copy interrupted"
    lines.append(f"{title}:")
    lines.append(f"  Copied: {counts['copied']}")
    lines.append(f"  Overwritten: {counts['overwritten']}")
    lines.append(f"  Skipped: {counts['skipped']}")
    lines.append(f"  Failed: {counts['failed'] + len(report.walk_errors)}")
    lines.append(f"  Directories created: {counts['directories']}")
    lines.append(f"  Bytes: {describe_size(report.bytes_copied)}")
    return "\n".join(lines)


def report_errors(errors: Iterable[WalkError]) -> None:
    """Print the final error summary to stderr; shown in every verbosity mode."""
    errors = list(errors)
    if not errors:
        return
    print(f"Errors ({len(errors)}):", file=sys.stderr)
    for error in errors:
        print(f"  {error}", file=sys.stderr)


def build_filter_rule(args: argparse.Namespace, file_config: FileConfig) -> FilterRule:
    """Combine command-line and configuration-file filters into one rule.

    Pattern lists given on the command line replace the file's lists.

    Raises:
        ConfigError: If the options are inconsistent or a size/ignore file is invalid.
        InvalidPatternError: If any pattern fails to compile.
    """
    return FilterRule.from_options(
        include=args.include if args.include else list(file_config.include),
        exclude=args.exclude if args.exclude else list(file_config.exclude),
        include_extensions=args.ext or [],
        exclude_extensions=args.exclude_ext or [],
        ignore_files=args.ignore_file or [],
        max_size=args.max_size,
    )


def run_display(args: argparse.Namespace, file_config: FileConfig, filter_rule: FilterRule) -> int:
    """Print the tree for ``args.path`` and return the exit code."""
    config = WalkConfig(
        root=args.path,
        max_depth=pick(args.depth, file_config.max_depth, None),
        show_empty_folders=pick(args.show_empty, file_config.show_empty_folders, False),
        filter_rule=filter_rule,
        follow_symlinks=args.follow_symlinks,
        skip_hidden=args.no_hidden,
    )
    result = walk(config)

    with SafeWriter(args.output if args.output else sys.stdout) as writer:
        try:
            for line in stream_tree(result, root_display_name(result.root)):
                writer.write_line(line)
            if args.summary:
                writer.write_line("")
                writer.write_line(format_counts(count_entries(result)))
        except BrokenPipeError:
            pass  # SafeWriter will automatically close in the context manager

    report_errors(result.errors.values())
    return EXIT_FAILURES if result.has_errors else EXIT_OK


def run_copy(args: argparse.Namespace, file_config: FileConfig, filter_rule: FilterRule, verbose: bool) -> int:
    """Copy ``args.source`` into ``args.destination`` and return the exit code."""
    config = CopyConfig(
        root=args.source,
        destination=args.destination,
        max_depth=args.depth,
        show_empty_folders=bool(args.show_empty),
        filter_rule=filter_rule,
        follow_symlinks=args.follow_symlinks,
        skip_hidden=args.no_hidden,
        overwrite=pick(args.overwrite, file_config.overwrite, False),
        dry_run=args.dry_run,
        preserve_metadata=pick(args.preserve, file_config.preserve_timestamps, False),
    )
    report = CopyExecutor(config, should_stop=signal_handler.stop_requested).run()

    if not args.quiet:
        warnings = [result.warning for result in report.results if result.warning] + report.warnings
        for warning in warnings:
            print(f"Warning: {warning}", file=sys.stderr)

    with SafeWriter(sys.stdout, interruptible=False) as writer:
        try:
            writer.write_line(format_copy_summary(report, verbose))
        except BrokenPipeError:
            pass

    report_errors(report.failures)
    return EXIT_FAILURES if report.has_failures else EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the fs-tools command-line interface.

    Exit codes:
        0: Successful completion
        1: Some entries failed, or a runtime error occurred
        2: Command-line syntax error or rejected configuration
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE) on Unix-like systems
    """
    parser = create_parser()
    # argparse calls sys.exit(2) for argument errors or sys.exit(0) for --version
    args = parser.parse_args(argv)

    verbosity = verbosity_of(args)
    configure_logging(verbosity)
    setup_signal_handling()

    try:
        try:
            validate_args(args)
            file_config = load_project_config(args.config)
            filter_rule = build_filter_rule(args, file_config)
        except (ValueError, ConfigError) as e:
            print(f"Error: {str(e)}", file=sys.stderr)
            sys.exit(EXIT_USAGE)

        try:
            if args.command == "display":
                exit_code = run_display(args, file_config, filter_rule)
            else:
                exit_code = run_copy(args, file_config, filter_rule, verbose=verbosity == VERBOSE)
        except ConfigError as e:
            print(f"Error: {str(e)}", file=sys.stderr)
            sys.exit(EXIT_USAGE)
        except Exception as e:
            print(f"Error: {str(e)}", file=sys.stderr)
            sys.exit(EXIT_FAILURES)
    finally:
        restore_signal_handling()

    # Handle exit codes based on received signals
    if signal_handler.output_closed():
        sys.exit(EXIT_SIGPIPE)
    elif signal_handler.stop_requested():
        sys.exit(EXIT_SIGINT)

    if exit_code != EXIT_OK:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
