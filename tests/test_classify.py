"""Tests for release_pr.classify."""

from __future__ import annotations

import pytest

from release_pr.classify import classify, is_release_commit, merged_pr_number
from release_pr.models import Event, Intent

PREFIX = "chore: release"


def _push(subject: str = "feat: add b", **kwargs) -> Event:
    fields = {
        "kind": "push",
        "ref": "refs/heads/main",
        "head_commit_subject": subject,
        "repo": "octo/app",
    }
    fields.update(kwargs)
    return Event(**fields)


def _pr_edit(**kwargs) -> Event:
    fields = {
        "kind": "pull_request",
        "base_ref": "main",
        "head_ref": "release-pr",
        "pr_action": "edited",
        "pr_title_changed": True,
        "pr_title": "chore: release v1.1.0",
        "pr_number": 7,
        "pr_head_repo": "octo/app",
        "repo": "octo/app",
    }
    fields.update(kwargs)
    return Event(**fields)


def _classify(event: Event):
    return classify(
        event, target_branch="main", pr_branch="release-pr", commit_prefix=PREFIX
    )


class TestMergedPrNumber:
    def test_merge_commit_with_owner(self) -> None:
        subject = "Merge pull request #12 from octo/release-pr"
        assert merged_pr_number(subject, "release-pr") == 12

    def test_merge_commit_without_owner(self) -> None:
        subject = "Merge pull request #3 from release-pr"
        assert merged_pr_number(subject, "release-pr") == 3

    def test_other_branch(self) -> None:
        subject = "Merge pull request #12 from octo/release-pr-old"
        assert merged_pr_number(subject, "release-pr") is None

    def test_feature_branch(self) -> None:
        subject = "Merge pull request #5 from octo/feature"
        assert merged_pr_number(subject, "release-pr") is None


class TestIsReleaseCommit:
    @pytest.mark.parametrize(
        "subject",
        [
            "chore: release v1.1.0",
            "chore: release v1.1.0 (#12)",
            "chore: release\tv1.1.0",
            "Merge pull request #12 from octo/release-pr",
        ],
    )
    def test_release_commits(self, subject: str) -> None:
        assert is_release_commit(subject, PREFIX, "release-pr")

    @pytest.mark.parametrize(
        "subject",
        [
            "feat: add b",
            "chore: releases are fun",
            "chore: release",
            "fix: chore: release v1.0.0",
        ],
    )
    def test_other_commits(self, subject: str) -> None:
        assert not is_release_commit(subject, PREFIX, "release-pr")


class TestClassifyPush:
    def test_fork_is_skipped(self) -> None:
        result = _classify(_push(is_fork=True))
        assert result.intent is Intent.SKIP
        assert "fork" in result.reason

    def test_fork_checked_before_branch(self) -> None:
        result = _classify(_push(is_fork=True, ref="refs/heads/dev"))
        assert "fork" in result.reason

    def test_other_branch_is_skipped(self) -> None:
        result = _classify(_push(ref="refs/heads/dev"))
        assert result.intent is Intent.SKIP
        assert "target branch is not main" in result.reason

    def test_tag_push_is_skipped(self) -> None:
        assert _classify(_push(ref="refs/tags/v1.0.0")).intent is Intent.SKIP

    def test_regular_commit_prepares_pr(self) -> None:
        result = _classify(_push("feat: add b"))
        assert result.intent is Intent.PREPARE_PR
        assert result.reason == ""

    def test_squash_merge_releases(self) -> None:
        assert _classify(_push("chore: release v1.1.0 (#9)")).intent is Intent.RELEASE

    def test_merge_commit_releases(self) -> None:
        event = _push("Merge pull request #9 from octo/release-pr")
        assert _classify(event).intent is Intent.RELEASE


class TestClassifyPullRequest:
    def test_title_edit_sets_version(self) -> None:
        assert _classify(_pr_edit()).intent is Intent.SET_VERSION

    @pytest.mark.parametrize(
        ("overrides", "reason"),
        [
            ({"base_ref": "dev"}, "PR base branch is not main"),
            ({"head_ref": "feature"}, "PR source branch is not release-pr"),
            ({"pr_head_repo": "fork/app"}, "PR is from a repo fork"),
            ({"pr_action": "opened"}, "PR was not edited"),
            ({"pr_title_changed": False}, "PR title was not changed"),
        ],
    )
    def test_skips_with_reason(self, overrides: dict, reason: str) -> None:
        result = _classify(_pr_edit(**overrides))
        assert result.intent is Intent.SKIP
        assert result.reason == reason


def test_other_event_is_skipped() -> None:
    result = _classify(Event(kind="workflow_dispatch", ref="refs/heads/main"))
    assert result.intent is Intent.SKIP
    assert "workflow_dispatch" in result.reason
