"""Changelog generation via git-cliff.

The release logic only needs three things from a changelog generator: the
next version implied by unreleased conventional commits, the changelog
body for one version, and the full changelog file. ChangelogOracle is that
interface; GitCliff implements it by shelling out to the git-cliff CLI.
Tests substitute a scripted fake.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from .errors import ExternalCallError
from .shell import run_tool
from .versions import normalize


class ChangelogOracle(Protocol):
    def next_version(self) -> str:
        """Bumped version implied by commits since the last tag."""
        ...

    def render(self, version: str) -> str:
        """Changelog body for exactly ``version`` (no heading)."""
        ...

    def write(self, version: str, path: str) -> None:
        """Regenerate the whole changelog file with ``version`` included."""
        ...


class GitCliff:
    """ChangelogOracle backed by the git-cliff CLI.

    Uses the repository's cliff.toml when present, otherwise the remote
    config at ``config_url``. GITHUB_REPO is exported so git-cliff's GitHub
    integration can resolve PR and author links.
    """

    def __init__(self, root: Path, config_url: str, repo: str = "") -> None:
        self.root = root
        self.config_url = config_url
        self.repo = repo or os.environ.get("GITHUB_REPOSITORY", "")

    def _cmd(self, *args: str) -> str:
        base = ["git-cliff"]
        if not (self.root / "cliff.toml").exists():
            base += ["--config-url", self.config_url]
        env = {"GITHUB_REPO": self.repo} if self.repo else None
        return run_tool(*base, *args, env=env)

    def next_version(self) -> str:
        output = self._cmd("--bumped-version", "--unreleased")
        try:
            return normalize(output)
        except ValueError as exc:
            raise ExternalCallError(
                ["git-cliff", "--bumped-version"], 0, f"unexpected output {output!r}"
            ) from exc

    def render(self, version: str) -> str:
        output = self._cmd("--tag", version, "--unreleased", "--strip", "all")
        # Drop the "## [vX.Y.Z] - date" heading and the blank line after it.
        return "\n".join(output.splitlines()[2:])

    def write(self, version: str, path: str) -> None:
        self._cmd("--tag", version, "--output", path)
