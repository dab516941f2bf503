"""Exclusion rules loaded from .gitignore-style ignore files."""

from os import PathLike
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from fs_tools.exceptions import ConfigError
from fs_tools.types import PathType


class IgnoreFileRules:
    """Exclusion rules using .gitignore pattern syntax.

    Complements the regular-expression filters with the pattern language most
    projects already maintain in their ignore files. Matching is delegated to the
    pathspec library so paths are judged the same way Git judges them, including
    negation (``!keep.log``), directory-only patterns (``build/``) and ``**``.

    Paths handed to ``exclude`` are relative to the walk root and use forward
    slashes. Directories must carry a trailing slash for directory-only patterns
    to apply to the directory itself.

    Attributes:
        spec (PathSpec): Compiled pattern matcher from the pathspec library.

    Example:
        >>> rules = IgnoreFileRules()
        >>> rules.add_rule("*.log")
        >>> rules.add_rule("build/")
        >>> rules.exclude("server.log")
        True
        >>> rules.exclude("build/")
        True
        >>> rules.exclude("src/main.py")
        False
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize the rules, optionally loading one or more ignore files.

        Args:
            rules_files: Path(s) to the file(s) containing .gitignore patterns.

        Raises:
            ConfigError: If any rules file does not exist or cannot be read.
        """
        self._patterns: List[GitWildMatchPattern] = []
        self.spec = PathSpec(self._patterns)

        if rules_files is not None:
            self.load_rules(rules_files)

    def exclude(self, path: str) -> bool:
        """Check if a relative path is matched by the loaded patterns."""
        return bool(self.spec.match_file(path))

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load and append patterns from one or more ignore files.

        Later patterns may override earlier ones, particularly through negation.

        Args:
            rules_files: Path(s) to file(s) containing .gitignore patterns.

        Raises:
            ConfigError: If any rules file does not exist or cannot be read.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.is_file():
                raise ConfigError(f"Ignore file not found: {path}")
            try:
                lines = path.read_text(encoding="utf-8").splitlines()
            except (OSError, UnicodeDecodeError) as e:
                raise ConfigError(f"Cannot read ignore file {path}: {e}")
            self._extend(PathSpec.from_lines(GitWildMatchPattern, lines).patterns)

    def add_rule(self, rule: str) -> None:
        """Add a single .gitignore pattern such as ``*.pyc`` or ``!important.txt``."""
        self._extend([GitWildMatchPattern(rule)])

    def has_rules(self) -> bool:
        """Return True if at least one pattern has been loaded."""
        return bool(self._patterns)

    def _extend(self, patterns: Sequence[GitWildMatchPattern]) -> None:
        self._patterns.extend(patterns)
        self.spec = PathSpec(self._patterns)
