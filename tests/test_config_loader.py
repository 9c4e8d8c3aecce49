"""
Unit tests for configuration loading.

Tests multi-layer config merging, environment variable overrides,
caching, and .env loading.
"""

import json
import os

import pytest
from pydantic import ValidationError

from relbump.core.config import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    load_config,
    load_layered_env,
)
from relbump.core.config.env import get_user_env_path
from relbump.core.config.loader import apply_env_overrides, deep_merge, load_json_file
from relbump.core.config.models import BumpConfig, HistoryConfig

# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    """Test the deep_merge helper function."""

    def test_nested_merge(self):
        base = {"a": 1, "b": {"x": 10, "y": 20}}
        override = {"b": {"y": 30, "z": 40}, "c": 3}
        assert deep_merge(base, override) == {"a": 1, "b": {"x": 10, "y": 30, "z": 40}, "c": 3}

    def test_override_replaces_lists(self):
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}


class TestLoadJsonFile:
    """Test JSON file loading."""

    def test_missing_file(self, tmp_path):
        assert load_json_file(tmp_path / "nope.json") is None

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert load_json_file(path) is None

    def test_non_dict(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert load_json_file(path) is None


class TestEnvOverrides:
    """Test RELBUMP_* environment overrides."""

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("RELBUMP_PACKAGER", "CI <ci@example.com>")
        monkeypatch.setenv("RELBUMP_RELEASE_MARKER", "v{version}")
        monkeypatch.setenv("RELBUMP_SKIP_MALFORMED", "1")
        monkeypatch.setenv("RELBUMP_SUBMODULE_PATH", "dashboard")

        result = apply_env_overrides({"history": {"pr_marker": "Merge pull request"}})

        assert result["packager"] == "CI <ci@example.com>"
        assert result["history"] == {
            "pr_marker": "Merge pull request",
            "release_marker": "v{version}",
            "skip_malformed": True,
        }
        assert result["submodule"] == {"path": "dashboard"}

    def test_does_not_mutate_input(self, monkeypatch):
        monkeypatch.setenv("RELBUMP_RELEASE_MARKER", "v{version}")
        original = {"history": {"skip_malformed": False}}
        apply_env_overrides(original)
        assert original == {"history": {"skip_malformed": False}}

    @pytest.mark.parametrize("value", ["false", "0"])
    def test_skip_malformed_false(self, monkeypatch, value):
        monkeypatch.setenv("RELBUMP_SKIP_MALFORMED", value)
        assert apply_env_overrides({})["history"]["skip_malformed"] is False


# ==============================================================================
# load_config Tests
# ==============================================================================


class TestLoadConfig:
    """Test the full precedence chain."""

    def test_defaults(self, tmp_path):
        config = load_config(tmp_path, use_cache=False)
        assert config.files.version_file == "setup.py"
        assert config.submodule.path == "web"
        assert config.submodule.official_branch_patterns == ["master", "dev", "release-*", "hotfix-*"]
        assert config.history.release_marker == "release-{version}"

    def test_project_overrides_user(self, tmp_path):
        user_path = get_user_config_path()
        user_path.parent.mkdir(parents=True)
        user_path.write_text(json.dumps({"packager": "User <u@x>", "package_name": "userpkg"}))
        get_project_config_path(tmp_path).write_text(json.dumps({"package_name": "netdata"}))

        config = load_config(tmp_path, use_cache=False)

        assert config.packager == "User <u@x>"
        assert config.package_name == "netdata"

    def test_env_overrides_project(self, tmp_path, monkeypatch):
        get_project_config_path(tmp_path).write_text(json.dumps({"package_name": "netdata"}))
        monkeypatch.setenv("RELBUMP_PACKAGE_NAME", "fromenv")

        assert load_config(tmp_path, use_cache=False).package_name == "fromenv"

    def test_cache(self, tmp_path):
        first = load_config(tmp_path)
        get_project_config_path(tmp_path).write_text(json.dumps({"package_name": "changed"}))
        assert load_config(tmp_path) is first
        clear_cache()
        assert load_config(tmp_path).package_name == "changed"

    def test_invalid_config_raises(self, tmp_path):
        get_project_config_path(tmp_path).write_text(
            json.dumps({"history": {"release_marker": "release"}})
        )
        with pytest.raises(ValidationError, match="version"):
            load_config(tmp_path, use_cache=False)


class TestModels:
    """Test model validation."""

    def test_bad_version_pattern(self):
        with pytest.raises(ValidationError, match="version_pattern"):
            BumpConfig(files={"version_pattern": "("})

    def test_history_requires_placeholder(self):
        with pytest.raises(ValidationError):
            HistoryConfig(release_marker="release-")

    @pytest.mark.parametrize(
        "marker", ["release-{version}-{0}", "release-{version}-{branch}", "{version}-{"]
    )
    def test_history_rejects_other_fields(self, marker):
        with pytest.raises(ValidationError, match="release_marker"):
            HistoryConfig(release_marker=marker)

    def test_history_accepts_escaped_braces(self):
        marker = "release-{version}-{{x}}"
        assert HistoryConfig(release_marker=marker).release_marker == marker


class TestLoadLayeredEnv:
    """Test .env loading precedence."""

    def test_project_env_does_not_override_os_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("EDITOR", "vim")
        (tmp_path / ".env").write_text("EDITOR=nano\nRELBUMP_PACKAGER=Env <e@x>\n")

        load_layered_env(project_dir=tmp_path, user_env_paths=[])

        assert os.environ["EDITOR"] == "vim"
        assert os.environ["RELBUMP_PACKAGER"] == "Env <e@x>"

    def test_project_env_overrides_user_env(self, tmp_path):
        user_env = tmp_path / "user.env"
        user_env.write_text("RELBUMP_PACKAGE_NAME=user\n")
        (tmp_path / ".env").write_text("RELBUMP_PACKAGE_NAME=project\n")

        load_layered_env(project_dir=tmp_path, user_env_paths=[user_env])

        assert os.environ["RELBUMP_PACKAGE_NAME"] == "project"

    def test_env_local_overrides_env(self, tmp_path):
        (tmp_path / ".env").write_text("RELBUMP_PACKAGE_NAME=shared\n")
        (tmp_path / ".env.local").write_text("RELBUMP_PACKAGE_NAME=local\n")

        load_layered_env(project_dir=tmp_path, user_env_paths=[])

        assert os.environ["RELBUMP_PACKAGE_NAME"] == "local"

    def test_default_user_env_under_xdg(self, tmp_path):
        user_env = get_user_env_path()
        assert user_env == tmp_path / "xdg" / "relbump" / ".env"
        user_env.parent.mkdir(parents=True)
        user_env.write_text("RELBUMP_PACKAGER=User <u@x>\n")
        project = tmp_path / "project"
        project.mkdir()

        load_layered_env(project_dir=project)

        assert os.environ["RELBUMP_PACKAGER"] == "User <u@x>"
