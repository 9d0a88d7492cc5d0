"""Event classification: decide what a repository event means for releases.

Rules, first match wins:

1. Push in a fork → skip.
2. Push to anything but the target branch → skip.
3. Push whose head commit is a merged release PR → release; any other
   push to the target branch → prepare-pr.
4. Title edit of the release PR (same repo, from the release branch into
   the target branch) → set-version; any other pull_request event → skip.
5. Anything else → skip.

A merged release PR is recognised purely from the pushed commit subject,
which covers all three merge strategies: squash and rebase merges keep the
release commit message ("<prefix> v1.2.3", possibly with " (#N)"), a
merge commit reads "Merge pull request #N from <owner>/<pr_branch>".
"""

from __future__ import annotations

import re

from .models import Classification, Event, Intent


def _skip(reason: str) -> Classification:
    return Classification(intent=Intent.SKIP, reason=reason)


def merged_pr_number(subject: str, pr_branch: str) -> int | None:
    """Return the PR number if subject is a merge commit of the release branch."""
    match = re.match(
        rf"Merge pull request #(\d+) from (?:\S+/)?{re.escape(pr_branch)}$", subject
    )
    return int(match.group(1)) if match else None


def is_release_commit(subject: str, commit_prefix: str, pr_branch: str) -> bool:
    """True if subject marks a just-merged release PR (any merge strategy)."""
    if re.match(rf"{re.escape(commit_prefix)}\s", subject):
        return True
    return merged_pr_number(subject, pr_branch) is not None


def classify(
    event: Event, target_branch: str, pr_branch: str, commit_prefix: str
) -> Classification:
    """Decide the release intent for an event.

    Args:
        event: The triggering event.
        target_branch: Branch releases are cut from.
        pr_branch: Technical release branch.
        commit_prefix: Release commit/title prefix.

    Returns:
        Classification with the intent, and a reason when skipping.
    """
    if event.kind == "push":
        if event.is_fork:
            return _skip("no releases in repo forks")
        if event.ref != f"refs/heads/{target_branch}":
            return _skip(f"target branch is not {target_branch}")
        if is_release_commit(event.head_commit_subject, commit_prefix, pr_branch):
            return Classification(intent=Intent.RELEASE)
        return Classification(intent=Intent.PREPARE_PR)

    if event.kind == "pull_request":
        if event.base_ref != target_branch:
            return _skip(f"PR base branch is not {target_branch}")
        if event.head_ref != pr_branch:
            return _skip(f"PR source branch is not {pr_branch}")
        if event.pr_head_repo != event.repo:
            return _skip("PR is from a repo fork")
        if event.pr_action != "edited":
            return _skip("PR was not edited")
        if not event.pr_title_changed:
            return _skip("PR title was not changed")
        return Classification(intent=Intent.SET_VERSION)

    return _skip(f"unsupported event {event.kind!r}")
