"""Regular-expression include/exclude rules and the per-entry matching decision.

Patterns are matched with ``re.search`` against the entry path relative to the
walk root, written with forward slashes (``a/x.rs``). Exclusion always wins:
a path matching any exclude pattern is excluded regardless of include patterns.
Include patterns only constrain non-directory entries, so ``\\.rs$`` keeps the
directories leading to ``.rs`` files.
"""

import re
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple, Union

from fs_tools.exceptions import ConfigError, InvalidPatternError
from fs_tools.filters.git_rules import IgnoreFileRules
from fs_tools.filters.size import parse_file_size
from fs_tools.types import PathType, Verdict


def compile_patterns(patterns: Iterable[str]) -> Tuple[Pattern[str], ...]:
    """Compile user-supplied patterns, failing on the first invalid one.

    Args:
        patterns: Regular expression strings in the order given by the user.

    Returns:
        The compiled patterns, order preserved.

    Raises:
        InvalidPatternError: If any pattern fails to compile.

    Example:
        >>> [p.pattern for p in compile_patterns([r"\\.log$", "^build"])]
        ['\\\\.log$', '^build']
    """
    compiled: List[Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise InvalidPatternError(pattern, str(e))
    return tuple(compiled)


def extension_pattern(extensions: Iterable[str]) -> Optional[str]:
    """Build a regular expression matching any of the given file extensions.

    Extensions may be given with or without a leading dot, and comma-separated
    values are split.

    Args:
        extensions: Extensions such as ``"rs"``, ``".py"`` or ``"md,txt"``.

    Returns:
        An anchored pattern, or None when no extension was supplied.

    Example:
        >>> extension_pattern([".rs", "md,txt"])
        '\\\\.(?:rs|md|txt)$'
        >>> extension_pattern([]) is None
        True
    """
    names: List[str] = []
    for value in extensions:
        for part in value.split(","):
            part = part.strip().lstrip(".")
            if part:
                names.append(re.escape(part))
    if not names:
        return None
    return r"\.(?:" + "|".join(names) + ")$"


class FilterRule:
    """An ordered set of include patterns and an ordered set of exclude patterns.

    Besides the regular expressions, a rule may carry gitignore-style rules loaded
    from ignore files and a maximum file size. Both of these only ever exclude,
    and they share the precedence of exclude patterns.

    Instances are immutable once built; every pattern is compiled in the
    constructor so that invalid input is rejected before any traversal begins.

    Attributes:
        include (Tuple[Pattern[str], ...]): Compiled include patterns.
        exclude (Tuple[Pattern[str], ...]): Compiled exclude patterns.
        ignore_rules (Optional[IgnoreFileRules]): Rules loaded from ignore files.
        max_size (Optional[int]): Files larger than this many bytes are excluded.

    Example:
        >>> rule = FilterRule(include=[r"\\.rs$"], exclude=[r"^target/"])
        >>> rule.verdict("src/main.rs")
        <Verdict.INCLUDED: 'included'>
        >>> rule.verdict("target/debug.rs")
        <Verdict.EXCLUDED: 'excluded'>
        >>> rule.verdict("README.md")
        <Verdict.EXCLUDED: 'excluded'>
    """

    def __init__(
        self,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
        ignore_rules: Optional[IgnoreFileRules] = None,
        max_size: Optional[int] = None,
    ) -> None:
        self.include = compile_patterns(include)
        self.exclude = compile_patterns(exclude)
        self.ignore_rules = ignore_rules if ignore_rules is not None and ignore_rules.has_rules() else None
        if max_size is not None and max_size < 0:
            raise ConfigError("Size cannot be negative")
        self.max_size = max_size

    @classmethod
    def from_options(
        cls,
        include: Sequence[str] = (),
        exclude: Sequence[str] = (),
        include_extensions: Sequence[str] = (),
        exclude_extensions: Sequence[str] = (),
        ignore_files: Sequence[PathType] = (),
        max_size: Optional[Union[str, int]] = None,
    ) -> "FilterRule":
        """Build a rule from command-line or configuration-file options.

        Args:
            include: Regular expressions a non-directory path must match.
            exclude: Regular expressions that exclude any matching path.
            include_extensions: Only keep files with one of these extensions.
            exclude_extensions: Drop files with any of these extensions.
            ignore_files: .gitignore-style files whose patterns exclude paths.
            max_size: Human-readable size limit (``"1MB"``) or bytes.

        Raises:
            ConfigError: If extension include and exclude lists are combined, an
                ignore file is missing, or the size is invalid.
            InvalidPatternError: If any regular expression fails to compile.
        """
        if include_extensions and exclude_extensions:
            raise ConfigError("Cannot specify both included and excluded extensions")

        include_patterns = list(include)
        exclude_patterns = list(exclude)
        included_ext = extension_pattern(include_extensions)
        if included_ext is not None:
            include_patterns.append(included_ext)
        excluded_ext = extension_pattern(exclude_extensions)
        if excluded_ext is not None:
            exclude_patterns.append(excluded_ext)

        ignore_rules = IgnoreFileRules(list(ignore_files)) if ignore_files else None
        size_limit = parse_file_size(max_size) if max_size is not None else None

        return cls(include_patterns, exclude_patterns, ignore_rules=ignore_rules, max_size=size_limit)

    def verdict(self, path: str, is_dir: bool = False, size: Optional[int] = None) -> Verdict:
        """Shorthand for ``matches(path, self, ...)``."""
        return matches(path, self, is_dir=is_dir, size=size)

    def __repr__(self) -> str:
        return (
            f"FilterRule(include={[p.pattern for p in self.include]}, "
            f"exclude={[p.pattern for p in self.exclude]}, max_size={self.max_size})"
        )


def matches(path: str, rule: FilterRule, is_dir: bool = False, size: Optional[int] = None) -> Verdict:
    """Decide whether a path is included by a filter rule.

    Args:
        path: Path relative to the walk root, using forward slashes.
        rule: The filter rule to apply.
        is_dir: Whether the path names a directory. Directories are only ever
            excluded by exclusion rules, never by include patterns or size.
        size: File size in bytes, checked against the rule's size limit.

    Returns:
        Verdict.EXCLUDED if any exclusion matches, or if include patterns exist
        and none of them matches a non-directory path; Verdict.INCLUDED otherwise.

    Example:
        >>> rule = FilterRule(include=[r"\\.rs$"], exclude=[r"\\.log$"])
        >>> matches("a", rule, is_dir=True)
        <Verdict.INCLUDED: 'included'>
        >>> matches("a/y.log", rule)
        <Verdict.EXCLUDED: 'excluded'>
    """
    if any(pattern.search(path) for pattern in rule.exclude):
        return Verdict.EXCLUDED

    if rule.ignore_rules is not None:
        if rule.ignore_rules.exclude(path + "/" if is_dir else path):
            return Verdict.EXCLUDED

    if is_dir:
        return Verdict.INCLUDED

    if rule.max_size is not None and size is not None and size > rule.max_size:
        return Verdict.EXCLUDED

    if rule.include and not any(pattern.search(path) for pattern in rule.include):
        return Verdict.EXCLUDED

    return Verdict.INCLUDED
