"""Filtered, structure-preserving batch copy."""

from .copy_executor import CopyExecutor, copy_tree
from .outcome import CopyReport, CopyResult, Outcome, SkipReason

__all__ = ["CopyExecutor", "CopyReport", "CopyResult", "Outcome", "SkipReason", "copy_tree"]
