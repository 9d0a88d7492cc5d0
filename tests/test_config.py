"""Tests for release_pr.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from release_pr.config import (
    DEFAULT_CLIFF_CONFIG_URL,
    ReleaseConfig,
    load_config,
    load_pyproject_settings,
)
from release_pr.errors import ConfigError


def _write_pyproject(root: Path, table: str) -> None:
    (root / "pyproject.toml").write_text(
        f'[project]\nname = "app"\n\n[tool.release-pr]\n{table}'
    )


class TestReleaseConfig:
    def test_defaults(self) -> None:
        config = ReleaseConfig()
        assert config.commit_prefix == "chore: release"
        assert config.pr_branch == "release-pr"
        assert config.target_branch is None
        assert config.version_cmd is None
        assert config.changelog_path == "CHANGELOG.md"
        assert config.cliff_config_url == DEFAULT_CLIFF_CONFIG_URL

    def test_blank_prefix_rejected(self) -> None:
        with pytest.raises(ValueError):
            ReleaseConfig(commit_prefix="  ")

    def test_blank_optional_values_unset(self) -> None:
        config = ReleaseConfig(target_branch="", version_cmd=" ")
        assert config.target_branch is None
        assert config.version_cmd is None

    def test_with_target_branch(self) -> None:
        config = ReleaseConfig().with_target_branch("main")
        assert config.target_branch == "main"


class TestLoadPyprojectSettings:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_pyproject_settings(tmp_path) == {}

    def test_missing_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "app"\n')
        assert load_pyproject_settings(tmp_path) == {}

    def test_hyphenated_keys(self, tmp_path: Path) -> None:
        _write_pyproject(tmp_path, 'pr-branch = "next"\ncommit_prefix = "release:"\n')

        assert load_pyproject_settings(tmp_path) == {
            "pr_branch": "next",
            "commit_prefix": "release:",
        }

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.release-pr\n")

        with pytest.raises(ConfigError, match="Invalid"):
            load_pyproject_settings(tmp_path)


class TestLoadConfig:
    def test_defaults_without_sources(self, tmp_path: Path) -> None:
        assert load_config(tmp_path) == ReleaseConfig()

    def test_precedence(self, tmp_path: Path) -> None:
        """CLI beats environment beats pyproject.toml."""
        _write_pyproject(
            tmp_path,
            'pr-branch = "from-toml"\n'
            'commit-prefix = "toml:"\n'
            'changelog-path = "docs/CHANGES.md"\n',
        )
        environ = {"PR_BRANCH": "from-env", "COMMIT_PREFIX": "env:"}
        overrides = {"commit_prefix": "cli:", "pr_branch": None}

        config = load_config(tmp_path, overrides, environ)

        assert config.commit_prefix == "cli:"
        assert config.pr_branch == "from-env"
        assert config.changelog_path == "docs/CHANGES.md"

    def test_empty_env_var_ignored(self, tmp_path: Path) -> None:
        config = load_config(tmp_path, environ={"PR_BRANCH": ""})
        assert config.pr_branch == "release-pr"

    def test_version_cmd_from_env(self, tmp_path: Path) -> None:
        environ = {"VERSION_CMD": "sed -i s/0.0.0/$RELEASE_PR_VERSION/ VERSION"}
        config = load_config(tmp_path, environ=environ)
        assert config.version_cmd == environ["VERSION_CMD"]

    def test_invalid_value(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(tmp_path, {"pr_branch": " "})
