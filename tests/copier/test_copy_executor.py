"""Tests for structure-preserving copies."""

import os

import pytest

from fs_tools.config import CopyConfig
from fs_tools.copier.copy_executor import CopyExecutor, copy_tree
from fs_tools.copier.outcome import Outcome, SkipReason
from fs_tools.exceptions import ConfigError
from fs_tools.filters.filter_rule import FilterRule
from fs_tools.types import EntryKind
from fs_tools.walker.entry import ErrorKind


def snapshot(directory):
    """Relative paths and file contents of everything below ``directory``."""
    if not directory.exists():
        return None
    state = {}
    for dirpath, dirnames, filenames in os.walk(directory):
        for name in dirnames:
            state[os.path.relpath(os.path.join(dirpath, name), directory)] = None
        for name in filenames:
            path = os.path.join(dirpath, name)
            with open(path, "rb") as f:
                state[os.path.relpath(path, directory)] = (f.read(), os.stat(path).st_mtime)
    return state


@pytest.fixture
def destination(tmp_path):
    return tmp_path / "dest"


def test_copy_whole_tree(nested_tree, destination):
    report = copy_tree(CopyConfig(root=nested_tree, destination=destination))

    assert (destination / "src" / "utils" / "helpers.py").read_text() == "def helper(): pass\n"
    assert (destination / "src" / "main.pyc").read_bytes() == b"compiled"
    assert report.counts() == {"copied": 6, "overwritten": 0, "skipped": 0, "failed": 0, "directories": 5}
    assert not report.has_failures
    files = [
        "src/main.py",
        "src/main.pyc",
        "src/utils/helpers.py",
        "docs/README.md",
        "node_modules/pkg/index.js",
        "setup.cfg",
    ]
    assert report.bytes_copied == sum((nested_tree / p).stat().st_size for p in files)


def test_destination_created_when_missing(scenario_tree, tmp_path):
    destination = tmp_path / "deep" / "nested" / "dest"
    copy_tree(CopyConfig(root=scenario_tree, destination=destination))
    assert (destination / "a" / "x.rs").is_file()


def test_copy_scenario_with_include_and_preserve(scenario_tree, destination):
    source_file = scenario_tree / "a" / "x.rs"
    os.utime(source_file, (1_600_000_000, 1_600_000_000))

    config = CopyConfig(
        root=scenario_tree,
        destination=destination,
        filter_rule=FilterRule(include=[r"\.rs$"]),
        preserve_metadata=True,
    )
    report = CopyExecutor(config).run()

    copied = destination / "a" / "x.rs"
    assert copied.read_text() == "fn main() {}\n"
    assert copied.stat().st_mtime == source_file.stat().st_mtime
    assert not (destination / "a" / "y.log").exists()
    assert not (destination / "b").exists()
    assert report.counts()["copied"] == 1


def test_preserve_restores_directory_mtime(scenario_tree, destination):
    os.utime(scenario_tree / "a", (1_500_000_000, 1_500_000_000))
    copy_tree(CopyConfig(root=scenario_tree, destination=destination, preserve_metadata=True))
    assert (destination / "a").stat().st_mtime == 1_500_000_000


def test_dry_run_changes_nothing_and_counts_like_real_run(nested_tree, destination):
    dry = copy_tree(CopyConfig(root=nested_tree, destination=destination, dry_run=True))

    assert not destination.exists()
    assert dry.dry_run
    assert all(r.outcome is Outcome.SKIPPED and r.reason is SkipReason.DRY_RUN for r in dry.results)

    real = copy_tree(CopyConfig(root=nested_tree, destination=destination))
    assert dry.counts() == real.counts()
    assert [r.planned for r in dry.results] == [r.outcome for r in real.results]


def test_dry_run_against_existing_destination(scenario_tree, destination):
    copy_tree(CopyConfig(root=scenario_tree, destination=destination))
    before = snapshot(destination)
    (scenario_tree / "a" / "new.rs").write_text("new")

    report = copy_tree(CopyConfig(root=scenario_tree, destination=destination, dry_run=True, overwrite=True))

    assert snapshot(destination) == before
    assert report.counts() == {"copied": 1, "overwritten": 2, "skipped": 0, "failed": 0, "directories": 0}


def test_rerun_without_overwrite_skips_everything(scenario_tree, destination):
    copy_tree(CopyConfig(root=scenario_tree, destination=destination))
    before = snapshot(destination)

    report = copy_tree(CopyConfig(root=scenario_tree, destination=destination))

    assert snapshot(destination) == before
    assert report.results
    assert all(r.outcome is Outcome.SKIPPED and r.reason is SkipReason.ALREADY_EXISTS for r in report.results)
    assert report.counts() == {"copied": 0, "overwritten": 0, "skipped": 2, "failed": 0, "directories": 0}


def test_overwrite_replaces_existing_files(scenario_tree, destination):
    copy_tree(CopyConfig(root=scenario_tree, destination=destination))
    (scenario_tree / "a" / "x.rs").write_text("changed")

    report = copy_tree(CopyConfig(root=scenario_tree, destination=destination, overwrite=True))

    assert (destination / "a" / "x.rs").read_text() == "changed"
    assert report.counts()["overwritten"] == 2


def test_directories_precede_their_children(nested_tree, destination):
    report = copy_tree(CopyConfig(root=nested_tree, destination=destination))
    position = {r.entry.relative_path: i for i, r in enumerate(report.results)}
    for result in report.results:
        parent = result.entry.relative_path.rpartition("/")[0]
        if parent:
            assert position[parent] < position[result.entry.relative_path]


def test_file_where_directory_expected_fails_and_continues(scenario_tree, destination):
    destination.mkdir()
    (destination / "a").write_text("in the way")
    (scenario_tree / "c.txt").write_text("after the conflict")

    dry = copy_tree(CopyConfig(root=scenario_tree, destination=destination, dry_run=True))
    report = copy_tree(CopyConfig(root=scenario_tree, destination=destination))

    results = {r.entry.relative_path: r for r in report.results}
    assert results["a"].outcome is Outcome.FAILED
    assert results["a"].error.kind is ErrorKind.IO_FAILURE
    # Children of a failed directory fail too; nothing stops the run
    assert results["a/x.rs"].outcome is Outcome.FAILED
    assert "parent directory could not be created" in results["a/x.rs"].error.message
    assert results["c.txt"].outcome is Outcome.COPIED
    assert report.has_failures
    assert dry.counts() == report.counts()
    assert report.counts()["failed"] == 3


def test_nested_directories_below_conflict_fail_in_dry_run(tmp_path, destination):
    source = tmp_path / "source"
    (source / "a" / "deep").mkdir(parents=True)
    (source / "a" / "deep" / "f.txt").write_text("x")
    destination.mkdir()
    (destination / "a").write_text("in the way")

    dry = copy_tree(CopyConfig(root=source, destination=destination, dry_run=True))

    assert [r.effective for r in dry.results] == [Outcome.FAILED] * 3
    assert (destination / "a").read_text() == "in the way"


def test_directory_where_file_expected_fails(scenario_tree, destination):
    (destination / "a" / "x.rs").mkdir(parents=True)

    for dry_run in (True, False):
        report = copy_tree(CopyConfig(root=scenario_tree, destination=destination, dry_run=dry_run))
        results = {r.entry.relative_path: r for r in report.results}
        assert results["a/x.rs"].outcome is Outcome.FAILED
        assert results["a/y.log"].effective is Outcome.COPIED


def test_unreadable_source_file_is_recorded(scenario_tree, destination, unreadable_dir):
    unreadable_dir(scenario_tree / "a" / "y.log")

    report = copy_tree(CopyConfig(root=scenario_tree, destination=destination))

    results = {r.entry.relative_path: r for r in report.results}
    assert results["a/x.rs"].outcome is Outcome.COPIED
    assert results["a/y.log"].outcome is Outcome.FAILED
    assert results["a/y.log"].error.kind is ErrorKind.PERMISSION_DENIED
    assert report.counts()["failed"] == 1


def test_unreadable_source_directory_is_a_walk_error(scenario_tree, destination, unreadable_dir):
    (scenario_tree / "b" / "hidden.txt").write_text("x")
    unreadable_dir(scenario_tree / "b")

    report = copy_tree(CopyConfig(root=scenario_tree, destination=destination))

    assert (destination / "a" / "x.rs").exists()
    assert scenario_tree / "b" in report.walk_errors
    assert report.has_failures
    assert len(report.failures) == 1


def test_destination_inside_source_rejected(scenario_tree):
    with pytest.raises(ConfigError, match="inside source"):
        copy_tree(CopyConfig(root=scenario_tree, destination=scenario_tree / "a" / "backup"))


def test_destination_is_a_file(scenario_tree, tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    with pytest.raises(NotADirectoryError):
        copy_tree(CopyConfig(root=scenario_tree, destination=target))


def test_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy_tree(CopyConfig(root=tmp_path / "missing", destination=tmp_path / "dest"))


def test_should_stop_interrupts_at_entry_boundary(nested_tree, destination):
    calls = []

    def stop_after_three():
        calls.append(1)
        return len(calls) > 3

    report = CopyExecutor(CopyConfig(root=nested_tree, destination=destination), stop_after_three).run()

    assert report.interrupted
    assert len(report.results) == 3
    assert (destination / "docs" / "README.md").exists()
    assert not (destination / "src").exists()


def test_symlinks_copied_as_links(tmp_path, destination, symlinks_supported):
    source = tmp_path / "source"
    source.mkdir()
    (source / "target.txt").write_text("x")
    os.symlink("target.txt", source / "link")

    report = copy_tree(CopyConfig(root=source, destination=destination))

    assert os.readlink(destination / "link") == "target.txt"
    kinds = {r.entry.relative_path: r.entry.kind for r in report.results}
    assert kinds["link"] is EntryKind.SYMLINK


def test_followed_symlinks_copied_as_content(tmp_path, destination, symlinks_supported):
    source = tmp_path / "source"
    source.mkdir()
    (source / "target.txt").write_text("content")
    os.symlink("target.txt", source / "link")

    copy_tree(CopyConfig(root=source, destination=destination, follow_symlinks=True))

    assert not (destination / "link").is_symlink()
    assert (destination / "link").read_text() == "content"
