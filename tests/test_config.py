"""Tests for walk/copy configuration and the project configuration file."""

from pathlib import Path

import pytest

from fs_tools.config import (
    CopyConfig,
    FileConfig,
    WalkConfig,
    find_config_file,
    load_config_file,
    load_project_config,
)
from fs_tools.exceptions import ConfigParseError
from fs_tools.filters.filter_rule import FilterRule


class TestWalkConfig:
    def test_defaults(self):
        config = WalkConfig(root="some/dir")
        assert config.root == Path("some/dir")
        assert config.max_depth is None
        assert not config.show_empty_folders
        assert not config.follow_symlinks
        assert not config.skip_hidden
        assert config.filter_rule.include == ()
        assert config.filter_rule.exclude == ()

    def test_is_immutable(self):
        config = WalkConfig(root=".")
        with pytest.raises(AttributeError):
            config.max_depth = 2

    def test_copy_config_walk_part(self):
        rule = FilterRule(exclude=["x"])
        config = CopyConfig(
            root="src", destination="dst", max_depth=2, filter_rule=rule, overwrite=True, dry_run=True
        )
        assert config.destination == Path("dst")
        walk_config = config.walk_config()
        assert type(walk_config) is WalkConfig
        assert walk_config.root == Path("src")
        assert walk_config.max_depth == 2
        assert walk_config.filter_rule is rule


def write_config(directory, text, name="fs-tools.toml"):
    path = directory / name
    path.write_text(text)
    return path


class TestConfigFile:
    def test_full_file(self, tmp_path):
        path = write_config(
            tmp_path,
            """
[display]
show_empty_folders = true
max_depth = 3

[filters]
exclude = ["\\\\.log$", "^target/"]
include = ["\\\\.rs$"]

[copy]
preserve_timestamps = true
overwrite = false
""",
        )
        config = load_config_file(path)
        assert config == FileConfig(
            show_empty_folders=True,
            max_depth=3,
            exclude=(r"\.log$", "^target/"),
            include=(r"\.rs$",),
            preserve_timestamps=True,
            overwrite=False,
            source=path,
        )

    def test_missing_keys_stay_unset(self, tmp_path):
        config = load_config_file(write_config(tmp_path, "[display]\nmax_depth = 1\n"))
        assert config.max_depth == 1
        assert config.show_empty_folders is None
        assert config.exclude == ()
        assert config.overwrite is None

    def test_unknown_keys_ignored(self, tmp_path):
        config = load_config_file(write_config(tmp_path, "[display]\ncolor = true\n[other]\nx = 1\n"))
        assert config.show_empty_folders is None

    @pytest.mark.parametrize(
        "text,message",
        [
            ("[display]\nmax_depth = -1\n", "display.max_depth must be a non-negative integer"),
            ("[display]\nmax_depth = true\n", "display.max_depth must be a non-negative integer"),
            ("[display]\nshow_empty_folders = 1\n", "display.show_empty_folders must be true or false"),
            ("[filters]\nexclude = \"x\"\n", "filters.exclude must be a list of strings"),
            ("[filters]\ninclude = [1, 2]\n", "filters.include must be a list of strings"),
            ("display = 3\n", "[display] must be a table"),
        ],
    )
    def test_wrong_types(self, tmp_path, text, message):
        with pytest.raises(ConfigParseError, match=message.replace("[", r"\[").replace("]", r"\]")):
            load_config_file(write_config(tmp_path, text))

    def test_invalid_toml(self, tmp_path):
        with pytest.raises(ConfigParseError) as excinfo:
            load_config_file(write_config(tmp_path, "[display\n"))
        assert excinfo.value.file_path.endswith("fs-tools.toml")

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ConfigParseError, match="cannot read file"):
            load_config_file(tmp_path)


class TestDiscovery:
    def test_no_file_found(self, tmp_path):
        assert find_config_file(tmp_path) is None
        assert load_project_config(directory=tmp_path) == FileConfig()

    def test_visible_name_preferred(self, tmp_path):
        write_config(tmp_path, "[display]\nmax_depth = 1\n", ".fs-tools.toml")
        assert find_config_file(tmp_path) == tmp_path / ".fs-tools.toml"
        write_config(tmp_path, "[display]\nmax_depth = 2\n")
        assert find_config_file(tmp_path) == tmp_path / "fs-tools.toml"
        assert load_project_config(directory=tmp_path).max_depth == 2

    def test_explicit_file_wins(self, tmp_path):
        write_config(tmp_path, "[display]\nmax_depth = 2\n")
        other = write_config(tmp_path, "[display]\nmax_depth = 5\n", "custom.toml")
        assert load_project_config(other, directory=tmp_path).max_depth == 5

    def test_explicit_file_missing(self, tmp_path):
        with pytest.raises(ConfigParseError, match="file not found"):
            load_project_config(tmp_path / "absent.toml", directory=tmp_path)

    def test_defaults_to_current_directory(self, tmp_path, monkeypatch):
        write_config(tmp_path, "[copy]\noverwrite = true\n")
        monkeypatch.chdir(tmp_path)
        assert load_project_config().overwrite is True
