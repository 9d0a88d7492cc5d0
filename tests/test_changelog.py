"""Tests for release_pr.changelog."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from release_pr.changelog import GitCliff
from release_pr.errors import ExternalCallError

URL = "https://example.com/cliff.toml"


class TestGitCliff:
    @patch("release_pr.changelog.run_tool")
    def test_next_version_uses_remote_config(
        self, mock_run: MagicMock, tmp_path: Path
    ) -> None:
        """Without a cliff.toml the default config URL is passed."""
        mock_run.return_value = "1.2.0"

        assert GitCliff(tmp_path, URL, "octo/app").next_version() == "v1.2.0"
        mock_run.assert_called_once_with(
            "git-cliff",
            "--config-url",
            URL,
            "--bumped-version",
            "--unreleased",
            env={"GITHUB_REPO": "octo/app"},
        )

    @patch("release_pr.changelog.run_tool")
    def test_next_version_rejects_garbage(
        self, mock_run: MagicMock, tmp_path: Path
    ) -> None:
        mock_run.return_value = "WARN no commits found"

        with pytest.raises(ExternalCallError, match="unexpected output"):
            GitCliff(tmp_path, URL, "octo/app").next_version()

    @patch("release_pr.changelog.run_tool")
    def test_local_config_preferred(self, mock_run: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "cliff.toml").write_text("[changelog]\n")
        mock_run.return_value = "v1.2.0"

        GitCliff(tmp_path, URL, "octo/app").next_version()

        assert "--config-url" not in mock_run.call_args.args

    @patch("release_pr.changelog.run_tool")
    def test_render_strips_heading(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = (
            "## [v1.2.0] - 2024-05-01\n\n"
            "### Features\n\n- add b\n\n### Fixes\n\n- fix a"
        )

        body = GitCliff(tmp_path, URL, "octo/app").render("v1.2.0")

        assert body == "### Features\n\n- add b\n\n### Fixes\n\n- fix a"
        assert mock_run.call_args.args[-5:] == (
            "--tag",
            "v1.2.0",
            "--unreleased",
            "--strip",
            "all",
        )

    @patch("release_pr.changelog.run_tool")
    def test_write(self, mock_run: MagicMock, tmp_path: Path) -> None:
        GitCliff(tmp_path, URL, "octo/app").write("v1.2.0", "CHANGELOG.md")

        assert mock_run.call_args.args[-4:] == (
            "--tag",
            "v1.2.0",
            "--output",
            "CHANGELOG.md",
        )

    @patch("release_pr.changelog.run_tool")
    def test_repo_from_environment(
        self,
        mock_run: MagicMock,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("GITHUB_REPOSITORY", "octo/other")
        mock_run.return_value = "v0.1.0"

        GitCliff(tmp_path, URL).next_version()

        assert mock_run.call_args.kwargs["env"] == {"GITHUB_REPO": "octo/other"}
