"""Data models for release-pr.

These Pydantic models represent the data flowing through one run of the
release state machine: the incoming event, the decided intent, the host's
view of the release pull request and the values reported back to CI.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Intent(str, Enum):
    """The action decided for the current event."""

    SKIP = "skip"
    PREPARE_PR = "prepare-pr"
    SET_VERSION = "set-version"
    RELEASE = "release"


class Event(BaseModel):
    """Metadata of the repository event that triggered the run.

    Attributes:
        kind: GitHub event name ("push", "pull_request", ...).
        ref: Fully-formed ref that was pushed (e.g. "refs/heads/main").
        base_ref: Target branch of the pull request (pull_request only).
        head_ref: Source branch of the pull request (pull_request only).
        head_commit_subject: First line of the pushed head commit message.
        pr_action: Pull request activity type ("edited", "opened", ...).
        pr_title_changed: Whether an "edited" action changed the title.
        pr_title: Current pull request title.
        pr_number: Pull request number.
        pr_head_repo: Owner/name of the repository the PR comes from.
        repo: Owner/name of this repository.
        is_fork: Whether this repository is a fork.
        default_branch: Repository default branch, if the payload carries it.
    """

    kind: str
    ref: str = ""
    base_ref: str = ""
    head_ref: str = ""
    head_commit_subject: str = ""
    pr_action: str = ""
    pr_title_changed: bool = False
    pr_title: str = ""
    pr_number: int | None = None
    pr_head_repo: str = ""
    repo: str = ""
    is_fork: bool = False
    default_branch: str | None = None


class Classification(BaseModel):
    """Output of the event classifier.

    Attributes:
        intent: What to do for this event.
        reason: Why the event is skipped (empty unless intent is SKIP).
    """

    intent: Intent
    reason: str = ""


class PullRequest(BaseModel):
    """An open pull request as reported by the host."""

    number: int
    title: str
    body: str = ""


class ReconcileOutcome(BaseModel):
    """What a reconciliation did to the release branch and pull request.

    Attributes:
        action: "created", "updated", "refreshed" (PR body only),
            "normalized" (PR title only) or "unchanged".
        pr_number: Number of the release pull request afterwards.
        version: The version the branch now carries.
        changelog: The changelog body shown on the pull request.
    """

    action: str
    pr_number: int
    version: str
    changelog: str


class RunResult(BaseModel):
    """Values reported to CI at the end of a run.

    ``result`` is one of "prepared-pr", "set-version", "released" or ""
    (nothing happened, in which case ``reason`` says why).
    """

    result: str = ""
    version: str = ""
    prerelease: bool = False
    changelog: str = ""
    pr_number: int | None = None
    reason: str = ""
