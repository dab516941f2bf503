"""Traversal and copy configuration, and the optional project configuration file.

The configuration file is TOML and is looked up in the current directory as
``fs-tools.toml`` or ``.fs-tools.toml`` unless a path is given explicitly.
Recognized keys::

    [display]
    show_empty_folders = false
    max_depth = 3

    [filters]
    exclude = ["\\\\.log$", "^target/"]
    include = []

    [copy]
    preserve_timestamps = true
    overwrite = false

Unknown sections and keys are ignored. Values given on the command line take
precedence over values read from the file.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type

from fs_tools.exceptions import ConfigParseError
from fs_tools.filters.filter_rule import FilterRule
from fs_tools.types import PathType

CONFIG_FILE_NAMES = ("fs-tools.toml", ".fs-tools.toml")


@dataclass(frozen=True)
class WalkConfig:
    """Immutable configuration for one traversal.

    Attributes:
        root: Directory the walk starts from.
        max_depth: Deepest level yielded (children of the root are depth 1).
            Directories at this depth are yielded but not descended. None means
            unbounded.
        show_empty_folders: Keep directories that end up with no surviving
            descendants after filtering.
        filter_rule: Include/exclude rules applied to every candidate entry.
        follow_symlinks: Describe and descend symlinks by their targets instead of
            reporting them as symlink entries.
        skip_hidden: Prune entries whose name starts with a dot.
    """

    root: Path
    max_depth: Optional[int] = None
    show_empty_folders: bool = False
    filter_rule: FilterRule = field(default_factory=FilterRule)
    follow_symlinks: bool = False
    skip_hidden: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError("max_depth cannot be negative")


@dataclass(frozen=True, kw_only=True)
class CopyConfig(WalkConfig):
    """Configuration for a copy run: the walk settings plus what to do with each entry.

    Attributes:
        destination: Directory that receives the copied structure.
        overwrite: Replace destination files that already exist.
        dry_run: Plan and report every action without touching the filesystem.
        preserve_metadata: Copy modification times and permission bits.
    """

    destination: Path
    overwrite: bool = False
    dry_run: bool = False
    preserve_metadata: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "destination", Path(self.destination))

    def walk_config(self) -> WalkConfig:
        """Return the traversal part of this configuration."""
        return WalkConfig(
            root=self.root,
            max_depth=self.max_depth,
            show_empty_folders=self.show_empty_folders,
            filter_rule=self.filter_rule,
            follow_symlinks=self.follow_symlinks,
            skip_hidden=self.skip_hidden,
        )


@dataclass(frozen=True)
class FileConfig:
    """Settings read from a project configuration file.

    Every field is None (or empty) when the file does not set it, so callers can
    tell "not configured" apart from an explicit value.
    """

    show_empty_folders: Optional[bool] = None
    max_depth: Optional[int] = None
    exclude: Tuple[str, ...] = ()
    include: Tuple[str, ...] = ()
    preserve_timestamps: Optional[bool] = None
    overwrite: Optional[bool] = None
    source: Optional[Path] = None


_SCHEMA: Dict[Tuple[str, str], Tuple[str, Type[Any]]] = {
    ("display", "show_empty_folders"): ("show_empty_folders", bool),
    ("display", "max_depth"): ("max_depth", int),
    ("filters", "exclude"): ("exclude", list),
    ("filters", "include"): ("include", list),
    ("copy", "preserve_timestamps"): ("preserve_timestamps", bool),
    ("copy", "overwrite"): ("overwrite", bool),
}


def find_config_file(directory: PathType = ".") -> Optional[Path]:
    """Return the first configuration file present in ``directory``, if any."""
    for name in CONFIG_FILE_NAMES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: PathType) -> FileConfig:
    """Parse a configuration file.

    Args:
        path: Path to a TOML configuration file.

    Returns:
        The recognized settings.

    Raises:
        ConfigParseError: If the file cannot be read, is not valid TOML, or a
            recognized key has a value of the wrong type.
    """
    config_path = Path(path)
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigParseError(str(config_path), f"cannot read file ({e.strerror or e})")
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(str(config_path), str(e))

    values: Dict[str, Any] = {"source": config_path}
    for (section, key), (attribute, expected) in _SCHEMA.items():
        table = data.get(section, {})
        if not isinstance(table, dict):
            raise ConfigParseError(str(config_path), f"[{section}] must be a table")
        if key not in table:
            continue
        values[attribute] = _check_value(config_path, f"{section}.{key}", table[key], expected)

    return FileConfig(**values)


def load_project_config(explicit: Optional[PathType] = None, directory: PathType = ".") -> FileConfig:
    """Load the explicit configuration file, or the one found in ``directory``.

    Returns an empty FileConfig when no file is given and none is found.

    Raises:
        ConfigParseError: If the explicit file is missing or any file is invalid.
    """
    if explicit is not None:
        if not Path(explicit).is_file():
            raise ConfigParseError(str(explicit), "file not found")
        return load_config_file(explicit)

    found = find_config_file(directory)
    if found is None:
        return FileConfig()
    return load_config_file(found)


def _check_value(config_path: Path, key: str, value: Any, expected: Type[Any]) -> Any:
    # bool is a subclass of int, so it has to be ruled out explicitly for integer keys
    if expected is int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigParseError(str(config_path), f"{key} must be a non-negative integer")
        return value
    if expected is bool:
        if not isinstance(value, bool):
            raise ConfigParseError(str(config_path), f"{key} must be true or false")
        return value
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigParseError(str(config_path), f"{key} must be a list of strings")
    items: List[str] = list(value)
    return tuple(items)
