"""Filtered, depth-limited directory traversal.

The walker produces a lazy, depth-first, pre-order sequence of ``Entry`` values.
Children are visited in lexicographic order of their names so that output is
reproducible across runs and platforms. Excluded directories are pruned: their
subtrees are never read. Failures on individual paths are collected in the
result instead of aborting the walk.
"""

import os
import stat
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple

import structlog

from fs_tools.config import WalkConfig
from fs_tools.filters.filter_rule import matches
from fs_tools.types import EntryKind, Verdict
from fs_tools.walker.entry import Entry, ErrorKind, WalkError, error_for
from fs_tools.walker.file_identifier import FileIdentifier

logger = structlog.get_logger(__name__)


class WalkResult:
    """Ordered entries of one walk plus the failures met along the way.

    The result is lazy: entries are produced as it is iterated, and ``errors``
    fills up as the traversal reaches unreadable paths. Entries already produced
    are cached, so iterating the result again replays them and then continues
    the traversal where it stopped. Partial results and partial failures coexist;
    one unreadable subtree does not invalidate entries collected elsewhere.

    Attributes:
        root: Absolute path of the walk root.
        errors: Mapping from failed path to its error, in discovery order.

    Example:
        >>> result = walk(WalkConfig(root="src"))  # doctest: +SKIP
        >>> for entry in result:  # doctest: +SKIP
        ...     print(entry.depth, entry.relative_path)
        1 fs_tools
        2 fs_tools/__init__.py
        >>> result.errors  # doctest: +SKIP
        {}
    """

    def __init__(self, root: Path, source: Iterator[Entry], errors: Dict[Path, WalkError]) -> None:
        self.root = root
        self.errors = errors
        self._source = source
        self._entries: List[Entry] = []
        self._exhausted = False

    def __iter__(self) -> Iterator[Entry]:
        index = 0
        while True:
            if index < len(self._entries):
                yield self._entries[index]
                index += 1
                continue
            if self._exhausted:
                return
            try:
                entry = next(self._source)
            except StopIteration:
                self._exhausted = True
                return
            self._entries.append(entry)

    @property
    def entries(self) -> List[Entry]:
        """All entries of the walk, running the traversal to completion if needed."""
        for _ in self:
            pass
        return list(self._entries)

    @property
    def complete(self) -> bool:
        """Whether the traversal has finished."""
        return self._exhausted

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class DirectoryWalker:
    """Recursive directory walker applying depth limits, filters and the empty-folder policy.

    Each call to ``walk`` performs a fresh traversal; a walk cannot be resumed
    once abandoned.

    Symbolic Link Behavior:
        By default symlinks are yielded as symlink entries and never descended.
        With ``follow_symlinks`` they are described by their targets. A followed
        link leading back to a directory on the current descent path is recorded
        as a SYMLINK_CYCLE error, detected by device and inode rather than by path
        string. Dangling links remain symlink entries.

    Empty Folders:
        When ``show_empty_folders`` is false, a directory's subtree is evaluated
        completely before the directory is yielded, and directories without any
        surviving descendant are suppressed. Directories whose contents are
        unknown (depth limit reached, or unreadable) are always yielded.
    """

    def __init__(self, config: WalkConfig) -> None:
        self.config = config

    def walk(self) -> WalkResult:
        """Start a traversal.

        Returns:
            A lazy WalkResult.

        Raises:
            FileNotFoundError: If the root path doesn't exist.
            NotADirectoryError: If the root path isn't a directory.
            PermissionError: If the root itself cannot be examined.
        """
        root = Path(os.path.abspath(self.config.root))
        if not root.exists():
            raise FileNotFoundError(f"Root path does not exist: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Root path is not a directory: {root}")

        root_id = FileIdentifier.from_stat(root.stat())
        errors: Dict[Path, WalkError] = {}
        return WalkResult(root, self._walk(root, root_id, errors), errors)

    def _walk(self, root: Path, root_id: FileIdentifier, errors: Dict[Path, WalkError]) -> Iterator[Entry]:
        if self.config.max_depth is not None and self.config.max_depth < 1:
            return
        yield from self._walk_directory(root, "", 1, {root_id}, errors)

    def _walk_directory(
        self,
        directory: Path,
        relative_dir: str,
        depth: int,
        ancestors: Set[FileIdentifier],
        errors: Dict[Path, WalkError],
    ) -> Iterator[Entry]:
        try:
            names = sorted(os.listdir(directory))
        except OSError as e:
            self._record(errors, error_for(directory, e))
            return

        for name in names:
            if self.config.skip_hidden and name.startswith("."):
                continue

            path = directory / name
            relative_path = f"{relative_dir}/{name}" if relative_dir else name
            described = self._describe(path, relative_path, depth, errors)
            if described is None:
                continue
            entry, identity = described

            if matches(relative_path, self.config.filter_rule, entry.is_dir, entry.size) is Verdict.EXCLUDED:
                logger.debug("walk.excluded", path=relative_path)
                continue

            if not entry.is_dir:
                yield entry
                continue

            if self.config.max_depth is not None and depth >= self.config.max_depth:
                yield entry
                continue

            if identity is None or identity in ancestors:
                self._record(errors, WalkError(path, ErrorKind.SYMLINK_CYCLE, "directory is its own ancestor"))
                continue

            ancestors.add(identity)
            try:
                children = self._walk_directory(path, relative_path, depth + 1, ancestors, errors)
                if self.config.show_empty_folders:
                    yield entry
                    yield from children
                else:
                    # The subtree must be evaluated before we know whether to show the directory.
                    # A directory with a failure anywhere below it is kept so the failure has a place.
                    recorded = len(errors)
                    buffered = list(children)
                    if buffered or len(errors) > recorded:
                        yield entry
                        yield from buffered
                    else:
                        logger.debug("walk.empty_suppressed", path=relative_path)
            finally:
                ancestors.discard(identity)

    def _describe(
        self, path: Path, relative_path: str, depth: int, errors: Dict[Path, WalkError]
    ) -> Optional[Tuple[Entry, Optional[FileIdentifier]]]:
        """Stat a candidate and build its entry, or record why it cannot be examined."""
        try:
            st = path.lstat()
        except OSError as e:
            self._record(errors, error_for(path, e))
            return None

        link_target: Optional[str] = None
        if stat.S_ISLNK(st.st_mode):
            try:
                link_target = os.readlink(path)
            except OSError:
                link_target = None
            if not self.config.follow_symlinks:
                return self._symlink_entry(path, relative_path, depth, st, link_target), None
            try:
                st = path.stat()
            except FileNotFoundError:
                # Dangling link: nothing to follow
                return self._symlink_entry(path, relative_path, depth, st, link_target), None
            except OSError as e:
                self._record(errors, error_for(path, e))
                return None

        if stat.S_ISDIR(st.st_mode):
            entry = Entry(path, relative_path, EntryKind.DIRECTORY, depth, None, st.st_mtime)
            return entry, FileIdentifier.from_stat(st)
        return Entry(path, relative_path, EntryKind.FILE, depth, st.st_size, st.st_mtime), None

    def _symlink_entry(
        self, path: Path, relative_path: str, depth: int, st: os.stat_result, link_target: Optional[str]
    ) -> Entry:
        return Entry(path, relative_path, EntryKind.SYMLINK, depth, None, st.st_mtime, link_target=link_target)

    def _record(self, errors: Dict[Path, WalkError], error: WalkError) -> None:
        errors[error.path] = error
        logger.warning("walk.error", path=str(error.path), kind=error.kind.value, detail=error.message)


def walk(config: WalkConfig) -> WalkResult:
    """Walk ``config.root`` and return the lazy, filtered sequence of entries.

    Raises:
        FileNotFoundError: If the root path doesn't exist.
        NotADirectoryError: If the root path isn't a directory.
    """
    return DirectoryWalker(config).walk()
