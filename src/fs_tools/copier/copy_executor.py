"""Structure-preserving copy of a filtered walk.

Each entry moves through ``planned -> copied | overwritten | skipped | failed``
in traversal order. Directories are created before any of their children are
processed. A failure on one entry is recorded in the report and processing
continues with the next entry.
"""

import os
import shutil
from pathlib import Path
from typing import Callable, Optional, Set

import structlog

from fs_tools.config import CopyConfig
from fs_tools.copier.outcome import CopyReport, CopyResult, Outcome, SkipReason
from fs_tools.exceptions import ConfigError
from fs_tools.types import EntryKind
from fs_tools.walker.entry import Entry, ErrorKind, WalkError, error_for, printable
from fs_tools.walker.walker import walk

logger = structlog.get_logger(__name__)


class CopyExecutor:
    """Copy the entries of a filtered walk into a destination directory.

    Dry runs plan exactly the same actions as real runs and report identical
    counts, but never touch the filesystem. Conflicts that are visible before
    copying (a directory where a file should go, or the reverse) are planned as
    failures in both modes, and so is everything below a directory that failed.

    Interruption:
        ``should_stop`` is polled before each entry. When it returns True the run
        ends at that entry boundary and the report is marked interrupted. A file
        being copied at the moment of interruption is not rolled back.

    Example:
        >>> config = CopyConfig(root="src", destination="backup", dry_run=True)  # doctest: +SKIP
        >>> report = CopyExecutor(config).run()  # doctest: +SKIP
        >>> report.counts()  # doctest: +SKIP
        {'copied': 12, 'overwritten': 0, 'skipped': 0, 'failed': 0, 'directories': 3}
    """

    def __init__(self, config: CopyConfig, should_stop: Optional[Callable[[], bool]] = None) -> None:
        self.config = config
        self.should_stop = should_stop
        self._failed_dirs: Set[str] = set()

    def run(self) -> CopyReport:
        """Walk the source and apply the copy plan to every entry.

        Returns:
            The report of all results.

        Raises:
            ConfigError: If the destination lies inside the source tree.
            FileNotFoundError: If the source root doesn't exist.
            NotADirectoryError: If the source root or destination isn't a directory.
        """
        self._check_destination()
        self._failed_dirs.clear()
        walk_result = walk(self.config.walk_config())
        report = CopyReport(dry_run=self.config.dry_run, walk_errors=walk_result.errors)

        if not self.config.dry_run:
            self.config.destination.mkdir(parents=True, exist_ok=True)

        for entry in walk_result:
            if self.should_stop is not None and self.should_stop():
                report.interrupted = True
                logger.warning("copy.interrupted", at=entry.relative_path)
                break
            result = self._process(entry)
            if entry.is_dir and result.outcome is Outcome.FAILED:
                self._failed_dirs.add(entry.relative_path)
            report.add(result)
            logger.info("copy.entry", path=entry.relative_path, outcome=result.outcome.value)

        if self.config.preserve_metadata and not self.config.dry_run:
            self._restore_directory_metadata(report)
        return report

    def _check_destination(self) -> None:
        source = Path(self.config.root).resolve()
        destination = Path(self.config.destination).resolve()
        if destination == source or source in destination.parents:
            raise ConfigError(f"Destination {self.config.destination} is inside source {self.config.root}")
        if destination.exists() and not destination.is_dir():
            raise NotADirectoryError(f"Destination is not a directory: {self.config.destination}")

    def _process(self, entry: Entry) -> CopyResult:
        destination = self.config.destination / entry.relative_path
        if self._under_failed_directory(entry):
            return self._conflict(entry, destination, "parent directory could not be created")

        exists = os.path.lexists(destination)
        dest_is_dir = exists and destination.is_dir() and not destination.is_symlink()

        if entry.kind is EntryKind.DIRECTORY:
            if dest_is_dir:
                return CopyResult(entry, destination, Outcome.SKIPPED, Outcome.SKIPPED, SkipReason.ALREADY_EXISTS)
            if exists:
                return self._conflict(entry, destination, "destination exists and is not a directory")
            return self._execute(entry, destination, Outcome.COPIED, self._make_directory)

        if dest_is_dir:
            return self._conflict(entry, destination, "destination exists and is a directory")
        if exists and not self.config.overwrite:
            return CopyResult(entry, destination, Outcome.SKIPPED, Outcome.SKIPPED, SkipReason.ALREADY_EXISTS)

        planned = Outcome.OVERWRITTEN if exists else Outcome.COPIED
        if entry.kind is EntryKind.SYMLINK:
            return self._execute(entry, destination, planned, self._copy_symlink)
        return self._execute(entry, destination, planned, self._copy_file)

    def _under_failed_directory(self, entry: Entry) -> bool:
        parent = entry.relative_path.rpartition("/")[0]
        while parent:
            if parent in self._failed_dirs:
                return True
            parent = parent.rpartition("/")[0]
        return False

    def _conflict(self, entry: Entry, destination: Path, message: str) -> CopyResult:
        error = WalkError(destination, ErrorKind.IO_FAILURE, message)
        logger.warning("copy.failed", path=entry.relative_path, detail=message)
        return CopyResult(entry, destination, Outcome.FAILED, Outcome.FAILED, error=error)

    def _execute(
        self,
        entry: Entry,
        destination: Path,
        planned: Outcome,
        action: Callable[[Entry, Path], Optional[str]],
    ) -> CopyResult:
        if self.config.dry_run:
            return CopyResult(entry, destination, planned, Outcome.SKIPPED, SkipReason.DRY_RUN)

        try:
            warning = action(entry, destination)
        except OSError as e:
            failed_path = Path(e.filename) if isinstance(e.filename, str) else entry.path
            error = error_for(failed_path, e)
            logger.warning("copy.failed", path=entry.relative_path, kind=error.kind.value, detail=error.message)
            return CopyResult(entry, destination, planned, Outcome.FAILED, error=error)

        return CopyResult(entry, destination, planned, planned, warning=warning)

    def _make_directory(self, entry: Entry, destination: Path) -> Optional[str]:
        destination.mkdir(exist_ok=True)
        return None

    def _copy_file(self, entry: Entry, destination: Path) -> Optional[str]:
        if destination.is_symlink():
            # Write a new file rather than through the existing link
            destination.unlink()
        shutil.copyfile(entry.path, destination)
        if self.config.preserve_metadata:
            return self._copy_metadata(entry, destination, follow_symlinks=True)
        return None

    def _copy_symlink(self, entry: Entry, destination: Path) -> Optional[str]:
        target = entry.link_target if entry.link_target is not None else os.readlink(entry.path)
        if os.path.lexists(destination):
            destination.unlink()
        os.symlink(target, destination)
        if self.config.preserve_metadata:
            return self._copy_metadata(entry, destination, follow_symlinks=False)
        return None

    def _copy_metadata(self, entry: Entry, destination: Path, follow_symlinks: bool) -> Optional[str]:
        """Copy timestamps and permission bits; failure is reported, not raised."""
        try:
            shutil.copystat(entry.path, destination, follow_symlinks=follow_symlinks)
        except OSError as e:
            message = f"could not preserve metadata for {printable(entry.relative_path)}: {e.strerror or e}"
            logger.warning("copy.metadata_failed", path=entry.relative_path, detail=str(e))
            return message
        return None

    def _restore_directory_metadata(self, report: CopyReport) -> None:
        # Children update their parent's mtime, so directories are stamped last, deepest first
        for result in reversed(report.results):
            if result.entry.kind is not EntryKind.DIRECTORY or result.outcome is not Outcome.COPIED:
                continue
            warning = self._copy_metadata(result.entry, result.destination, follow_symlinks=True)
            if warning is not None:
                report.warnings.append(warning)


def copy_tree(config: CopyConfig, should_stop: Optional[Callable[[], bool]] = None) -> CopyReport:
    """Run a copy with ``config`` and return its report."""
    return CopyExecutor(config, should_stop).run()
