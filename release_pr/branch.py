"""Release branch and release pull request reconciliation.

The release branch always holds exactly one commit on top of the target
branch: the changelog (plus whatever ``version_cmd`` changed) for the next
version, with the message "<commit_prefix> <version>". The branch is never
appended to; whenever the desired state differs from what is on GitHub it
is rebuilt from its base and force-pushed, then the pull request is
created or its title and body are rewritten.

Every call re-reads the branch and pull request from GitHub, so running
the same reconciliation twice changes nothing the second time.
"""

from __future__ import annotations

from pydantic import BaseModel

from .changelog import ChangelogOracle
from .config import ReleaseConfig
from .github import ReleaseHost
from .models import PullRequest, ReconcileOutcome
from .shell import git, group, notice, run_script, step
from .versions import commit_message, require_version, resolve_version


class BranchState(BaseModel):
    """The release commit currently on the remote release branch.

    Attributes:
        subject: Commit message subject.
        parent: SHA the single release commit sits on.
    """

    subject: str
    parent: str


def read_branch_state(pr_branch: str) -> BranchState | None:
    """Fetch the release branch from origin and describe its commit.

    Returns None when the branch does not exist on origin.
    """
    if not git("ls-remote", "--heads", "origin", f"refs/heads/{pr_branch}"):
        return None
    ref = f"refs/remotes/origin/{pr_branch}"
    git("fetch", "--force", "origin", f"+refs/heads/{pr_branch}:{ref}")
    return BranchState(
        subject=git("log", "-1", "--pretty=format:%s", ref),
        parent=git("rev-parse", f"{ref}^"),
    )


def rebuild_branch(
    config: ReleaseConfig,
    oracle: ChangelogOracle,
    version: str,
    base: str,
) -> None:
    """Recreate the release branch as a single commit on ``base`` and push it.

    Runs version_cmd (with RELEASE_PR_VERSION set), regenerates the
    changelog file, commits everything and force-pushes. Nothing is pushed
    if any of those steps fails.
    """
    message = commit_message(config.commit_prefix, version)
    git("checkout", "-B", config.pr_branch, base)

    if config.version_cmd:
        with group("Running custom version command"):
            run_script(config.version_cmd, {"RELEASE_PR_VERSION": version})

    oracle.write(version, config.changelog_path)
    git("add", "--all")
    git("commit", "--allow-empty", "-m", message)
    git("push", "origin", config.pr_branch, "--force")
    print(f"  {config.pr_branch}: {message}")


def checkout_base(
    config: ReleaseConfig, state: BranchState | None, base: str | None
) -> str:
    """Check out the commit the release commit sits on, detached.

    Changelog rendering and version computation read the checked-out
    history, so both must run here rather than on whatever the event
    checked out (e.g. a pull request merge ref).

    Args:
        config: Effective configuration.
        state: Current remote release branch, if any.
        base: Explicit base, or None to keep the existing release commit's
              parent (falling back to the target branch head).

    Returns:
        The base that was checked out.
    """
    if base is None:
        base = state.parent if state else f"origin/{config.target_branch}"
    git("checkout", "--detach", base)
    return base


def reconcile(
    config: ReleaseConfig,
    oracle: ChangelogOracle,
    host: ReleaseHost,
    version: str,
    *,
    pr: PullRequest | None,
    base: str | None = None,
) -> ReconcileOutcome:
    """Make the release branch and pull request show ``version``.

    Args:
        config: Effective configuration (target_branch must be resolved).
        oracle: Changelog generator.
        host: GitHub operations.
        version: Normalized version the release PR should carry.
        pr: The currently open release PR, or None.
        base: Commit the release commit must sit on. None keeps the
              existing release commit's parent (amend semantics), falling
              back to the target branch head when there is no branch.

    Returns:
        What was done and the resulting PR number.
    """
    step(f"Reconciling {config.pr_branch} for {version}")

    state = read_branch_state(config.pr_branch)
    base = checkout_base(config, state, base)
    return _reconcile_at(config, oracle, host, version, pr, state, base)


def _reconcile_at(
    config: ReleaseConfig,
    oracle: ChangelogOracle,
    host: ReleaseHost,
    version: str,
    pr: PullRequest | None,
    state: BranchState | None,
    base: str,
) -> ReconcileOutcome:
    message = commit_message(config.commit_prefix, version)
    changelog = oracle.render(version)

    if pr is not None and state is not None:
        if state.subject == message and state.parent == base:
            if pr.body.strip() != changelog.strip():
                host.edit_pr(pr.number, message, changelog)
                notice(f"Refreshed description of release PR #{pr.number}")
                action = "refreshed"
            elif pr.title != message:
                host.edit_pr(pr.number, message)
                notice(f"Normalized title for release PR #{pr.number}")
                action = "normalized"
            else:
                notice(f"No changes needed for release PR #{pr.number}")
                action = "unchanged"
            return ReconcileOutcome(
                action=action, pr_number=pr.number, version=version, changelog=changelog
            )

    rebuild_branch(config, oracle, version, base)

    if pr is None:
        number = host.create_pr(
            config.pr_branch, str(config.target_branch), message, changelog
        )
        notice(f"Created new release PR #{number}")
        action = "created"
    else:
        number = pr.number
        host.edit_pr(number, message, changelog)
        notice(f"Updated existing release PR #{number}")
        action = "updated"

    return ReconcileOutcome(
        action=action, pr_number=number, version=version, changelog=changelog
    )


def prepare_release_pr(
    config: ReleaseConfig,
    oracle: ChangelogOracle,
    host: ReleaseHost,
    *,
    fallback_version: str | None = None,
) -> ReconcileOutcome:
    """Create or refresh the release PR for the target branch head.

    The next version is computed from unreleased commits. A version set by
    hand in the open release PR's title (or ``fallback_version`` when there
    is no open PR) overrides it when it is a prerelease or not lower.

    Raises:
        VersionExtractionError: If the open PR's title has no version.
    """
    step("Determining next version")

    computed = oracle.next_version()
    pr = host.find_open_pr(config.pr_branch)
    if pr is not None:
        manual: str | None = require_version(pr.title, config.commit_prefix)
        print(f"  release PR #{pr.number}: {manual}")
    else:
        manual = fallback_version
    version = resolve_version(manual, computed)
    print(f"  computed: {computed}, using: {version}")

    base = git("rev-parse", "HEAD")
    return reconcile(config, oracle, host, version, pr=pr, base=base)


def apply_manual_version(
    config: ReleaseConfig,
    oracle: ChangelogOracle,
    host: ReleaseHost,
    title: str,
    number: int | None,
) -> ReconcileOutcome | None:
    """Apply a version typed into the release PR title.

    The version is validated before anything is touched. The release
    commit keeps its base; only its content and message change. The
    computed version and the changelog are both taken from that base.

    Returns:
        The outcome, or None when the release PR is no longer open.

    Raises:
        VersionExtractionError: If the title has no version.
    """
    step("Applying version from release PR title")

    manual = require_version(title, config.commit_prefix)
    pr = host.find_open_pr(config.pr_branch)
    if pr is None or (number is not None and pr.number != number):
        notice(f"Release PR #{number} is no longer open")
        return None

    state = read_branch_state(config.pr_branch)
    base = checkout_base(config, state, None)
    version = resolve_version(manual, oracle.next_version())
    print(f"  title: {manual}, using: {version}")

    step(f"Reconciling {config.pr_branch} for {version}")
    return _reconcile_at(config, oracle, host, version, pr, state, base)
