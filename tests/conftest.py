"""Test configuration and fixtures for fs-tools."""

import os

import pytest


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture
def scenario_tree(tmp_path):
    """Source tree {a/x.rs, a/y.log, b/} with b empty."""
    source = tmp_path / "source"
    (source / "a").mkdir(parents=True)
    (source / "a" / "x.rs").write_text("fn main() {}\n")
    (source / "a" / "y.log").write_text("log line\n")
    (source / "b").mkdir()
    return source


@pytest.fixture
def nested_tree(tmp_path):
    """A few levels of directories with mixed files."""
    root = tmp_path / "project"
    (root / "src" / "utils").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "node_modules" / "pkg").mkdir(parents=True)
    (root / "src" / "main.py").write_text("def main(): pass\n")
    (root / "src" / "main.pyc").write_bytes(b"compiled")
    (root / "src" / "utils" / "helpers.py").write_text("def helper(): pass\n")
    (root / "docs" / "README.md").write_text("# Docs\n")
    (root / "node_modules" / "pkg" / "index.js").write_text("export default {}\n")
    (root / "setup.cfg").write_text("[metadata]\n")
    return root


@pytest.fixture
def symlinks_supported(tmp_path):
    """Skip the test when the platform cannot create symlinks."""
    probe = tmp_path / "probe_link"
    try:
        os.symlink(tmp_path, probe)
    except (OSError, NotImplementedError):
        pytest.skip("Symlink creation not supported on this platform/environment")
    probe.unlink()
    return True


@pytest.fixture
def unreadable_dir(tmp_path):
    """Factory making a directory unreadable, restored after the test.

    Skips when permissions are not enforced (Windows, or running as root).
    """
    if not hasattr(os, "geteuid") or os.geteuid() == 0:
        pytest.skip("Directory permissions are not enforced for this user")

    locked = []

    def lock(path):
        path.chmod(0o000)
        locked.append(path)
        return path

    yield lock

    for path in locked:
        path.chmod(0o755)


@pytest.fixture
def undecodable_name(tmp_path):
    """A file name that is not valid UTF-8, as Python sees it after os.listdir."""
    name = os.fsdecode(b"bad\xff.txt")
    try:
        (tmp_path / name).write_text("x")
    except (OSError, UnicodeError):
        pytest.skip("Filesystem does not accept names that are not valid UTF-8")
    (tmp_path / name).unlink()
    return name
