"""Include/exclude filtering for directory traversal."""

from .filter_rule import FilterRule, compile_patterns, extension_pattern, matches
from .git_rules import IgnoreFileRules
from .size import describe_size, parse_file_size

__all__ = [
    "FilterRule",
    "IgnoreFileRules",
    "compile_patterns",
    "describe_size",
    "extension_pattern",
    "matches",
    "parse_file_size",
]
