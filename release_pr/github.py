"""GitHub host operations via the gh CLI.

Everything the release logic needs from the source-control host: the open
release pull request, PR create/edit, repository metadata and releases.
State is always read fresh from GitHub; nothing is cached between calls.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

from .errors import ExternalCallError
from .models import PullRequest
from .shell import gh


class ReleaseHost(Protocol):
    def is_fork(self, repo: str) -> bool: ...

    def default_branch(self, repo: str) -> str: ...

    def find_open_pr(self, head: str) -> PullRequest | None: ...

    def pr_title(self, number: int) -> str: ...

    def create_pr(self, head: str, base: str, title: str, body: str) -> int: ...

    def edit_pr(self, number: int, title: str, body: str | None = None) -> None: ...

    def create_release(self, tag: str, body: str, prerelease: bool) -> None: ...

    def publish_release(self, tag: str, body: str | None, prerelease: bool) -> None: ...


def _parse_json(output: str, cmd: list[str]) -> Any:
    try:
        return json.loads(output) if output else None
    except json.JSONDecodeError as exc:
        raise ExternalCallError(cmd, 0, f"unexpected output: {exc}") from exc


class GitHub:
    """ReleaseHost implementation using the authenticated gh CLI."""

    def is_fork(self, repo: str) -> bool:
        return gh("api", f"repos/{repo}", "--jq", ".fork") == "true"

    def default_branch(self, repo: str) -> str:
        return gh(
            "repo",
            "view",
            repo,
            "--json",
            "defaultBranchRef",
            "--jq",
            ".defaultBranchRef.name",
        )

    def find_open_pr(self, head: str) -> PullRequest | None:
        """Return the open pull request from branch ``head``, if any."""
        cmd = ["pr", "list", "--state", "open", "--head", head]
        cmd += ["--json", "number,title,body"]
        prs = _parse_json(gh(*cmd), ["gh", *cmd]) or []
        if not prs:
            return None
        return PullRequest(**prs[0])

    def pr_title(self, number: int) -> str:
        return gh("pr", "view", str(number), "--json", "title", "--jq", ".title")

    def create_pr(self, head: str, base: str, title: str, body: str) -> int:
        """Create a pull request and return its number.

        gh prints the URL of the new pull request; the number is its last
        path segment.
        """
        url = gh(
            "pr",
            "create",
            "--head",
            head,
            "--base",
            base,
            "--title",
            title,
            "--body",
            body,
        )
        number = url.rstrip("/").rsplit("/", 1)[-1]
        if not number.isdigit():
            raise ExternalCallError(
                ["gh", "pr", "create"], 0, f"unexpected output: {url}"
            )
        return int(number)

    def edit_pr(self, number: int, title: str, body: str | None = None) -> None:
        args = ["pr", "edit", str(number), "--title", title]
        if body is not None:
            args += ["--body", body]
        gh(*args)

    def create_release(self, tag: str, body: str, prerelease: bool) -> None:
        """Create a draft release for an already pushed tag."""
        args = ["release", "create", tag, "--draft", "--verify-tag"]
        args += ["--title", tag, "--notes", body]
        if prerelease:
            args.append("--prerelease")
        gh(*args)

    def publish_release(self, tag: str, body: str | None, prerelease: bool) -> None:
        """Turn a draft release into a published one.

        Non-prerelease versions are marked as the latest release.
        """
        args = ["release", "edit", tag, "--draft=false"]
        args.append(f"--prerelease={'true' if prerelease else 'false'}")
        args.append(f"--latest={'false' if prerelease else 'true'}")
        if body is not None:
            args += ["--notes", body]
        gh(*args)
