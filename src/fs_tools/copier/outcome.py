"""Per-entry copy outcomes and the report accumulated over a copy run."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from fs_tools.types import EntryKind
from fs_tools.walker.entry import Entry, WalkError, printable


class Outcome(str, Enum):
    """Final state of one planned entry."""

    COPIED = "copied"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(str, Enum):
    """Why an entry was skipped."""

    ALREADY_EXISTS = "already exists"
    DRY_RUN = "dry run"


@dataclass(frozen=True)
class CopyResult:
    """What happened to one entry.

    ``planned`` is the action decided from the source entry and the state of the
    destination; ``outcome`` is what was actually done. They differ in a dry run
    (outcome SKIPPED with reason DRY_RUN) and when execution fails.

    Attributes:
        entry: The source entry.
        destination: Where the entry is (or would be) written.
        planned: COPIED, OVERWRITTEN, SKIPPED or FAILED (for conflicts known up front).
        outcome: The final state.
        reason: Why the entry was skipped, if it was.
        error: Cause of failure, if it failed.
        warning: Non-fatal problem, such as metadata that could not be preserved.
    """

    entry: Entry
    destination: Path
    planned: Outcome
    outcome: Outcome
    reason: Optional[SkipReason] = None
    error: Optional[WalkError] = None
    warning: Optional[str] = None

    @property
    def effective(self) -> Outcome:
        """The outcome a real run produces: the plan for dry-run skips, the outcome otherwise."""
        if self.outcome is Outcome.SKIPPED and self.reason is SkipReason.DRY_RUN:
            return self.planned
        return self.outcome

    def describe(self) -> str:
        """One line for verbose summaries, e.g. ``skipped (already exists) a/x.rs``."""
        path = printable(self.entry.relative_path) + ("/" if self.entry.is_dir else "")
        if self.outcome is Outcome.FAILED and self.error is not None:
            return f"failed {path}: {self.error.kind.value} ({self.error.message})"
        if self.reason is SkipReason.DRY_RUN:
            return f"would be {self.planned.value} {path}"
        if self.reason is not None:
            return f"{self.outcome.value} ({self.reason.value}) {path}"
        return f"{self.outcome.value} {path}"


@dataclass
class CopyReport:
    """Accumulated results of one copy run.

    Only the copy executor appends to a report, and only while its run is in
    progress.

    Attributes:
        dry_run: Whether the run was a dry run.
        results: One result per processed entry, in traversal order.
        walk_errors: Paths the walker could not read, with their causes.
        warnings: Non-fatal problems not tied to a single result.
        interrupted: Whether the run was stopped before the walk finished.
    """

    dry_run: bool = False
    results: List[CopyResult] = field(default_factory=list)
    walk_errors: Dict[Path, WalkError] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    interrupted: bool = False

    def add(self, result: CopyResult) -> None:
        self.results.append(result)

    def counts(self) -> Dict[str, int]:
        """Tally non-directory results by effective outcome, plus directories created.

        Dry runs tally the planned actions, so a dry run and a real run over the
        same inputs report identical counts.
        """
        counts = {outcome.value: 0 for outcome in Outcome}
        counts["directories"] = 0
        for result in self.results:
            effective = result.effective
            if result.entry.kind is EntryKind.DIRECTORY:
                if effective is Outcome.COPIED:
                    counts["directories"] += 1
                elif effective is Outcome.FAILED:
                    counts[Outcome.FAILED.value] += 1
                continue
            counts[effective.value] += 1
        return counts

    @property
    def bytes_copied(self) -> int:
        return sum(
            result.entry.size or 0
            for result in self.results
            if result.entry.kind is EntryKind.FILE and result.effective in (Outcome.COPIED, Outcome.OVERWRITTEN)
        )

    @property
    def failures(self) -> List[WalkError]:
        """Every per-path failure, from the walk and from copying."""
        failed = list(self.walk_errors.values())
        failed.extend(result.error for result in self.results if result.error is not None)
        return failed

    @property
    def has_failures(self) -> bool:
        return bool(self.walk_errors) or any(result.outcome is Outcome.FAILED for result in self.results)
