"""Exceptions raised by the release pipeline.

Core modules raise these; the CLI turns them into ``::error::`` output and
a non-zero exit status.
"""

from __future__ import annotations

from collections.abc import Sequence


class ReleasePRError(Exception):
    """Base class for all fatal release-pr conditions."""


class ConfigError(ReleasePRError):
    """Invalid configuration or unreadable event payload."""


class VersionExtractionError(ReleasePRError):
    """A title or commit message carries no parseable version after the prefix."""

    def __init__(self, text: str, commit_prefix: str) -> None:
        self.text = text
        self.commit_prefix = commit_prefix
        super().__init__(
            f"Failed to extract version from '{text}'. "
            f"Expected format: '{commit_prefix} v1.2.3' "
            "(version may be without 'v' prefix)"
        )


class ExternalCallError(ReleasePRError):
    """A git, gh, git-cliff or version_cmd invocation failed."""

    def __init__(self, cmd: Sequence[str], returncode: int, stderr: str) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(
            f"Command failed with exit code {returncode}: {cmd[0]} "
            f"{' '.join(cmd[1:2])}{detail}"
        )


class RaceDetectedError(ReleasePRError):
    """The merged release PR no longer matches the target branch history.

    Raised after a superseding release PR has been created or refreshed, so
    the release run reports failure and downstream publishing does not fire.
    """

    def __init__(self, version: str, pr_number: int | None) -> None:
        self.version = version
        self.pr_number = pr_number
        where = f" (see release PR #{pr_number})" if pr_number else ""
        super().__init__(
            f"Race condition detected: changelog for {version} differs from "
            f"the committed one, release aborted{where}"
        )
