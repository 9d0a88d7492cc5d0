"""Release pipeline: classify → prepare PR / set version / release.

One run handles one repository event:

1. Resolve the effective target branch and fork status
2. Classify the event into an intent
3. prepare-pr: compute the next version and reconcile the release PR
4. set-version: apply the version typed into the release PR title
5. release: verify the merged changelog and tag + draft-release it

Runs must be serialized per repository (one concurrency group in the
workflow): all flows force-push the same branch and edit the same PR.
"""

from __future__ import annotations

from .branch import apply_manual_version, prepare_release_pr
from .changelog import ChangelogOracle
from .classify import classify
from .config import ReleaseConfig
from .github import ReleaseHost
from .models import Classification, Event, Intent, RunResult
from .release import cut_release
from .shell import notice, step
from .versions import is_prerelease


def resolve_context(
    event: Event, fork_known: bool, config: ReleaseConfig, host: ReleaseHost
) -> tuple[Event, ReleaseConfig]:
    """Fill in what the event payload may lack, asking GitHub if needed.

    The target branch defaults to the repository's default branch; the
    fork flag is only looked up for pushes, where it matters.
    """
    if config.target_branch is None:
        branch = event.default_branch or host.default_branch(event.repo)
        config = config.with_target_branch(branch)
    if event.kind == "push" and not fork_known:
        event = event.model_copy(update={"is_fork": host.is_fork(event.repo)})
    return event, config


def classify_event(event: Event, config: ReleaseConfig) -> Classification:
    """Classify an event and report the decision."""
    step("Routing event")
    decision = classify(
        event,
        target_branch=str(config.target_branch),
        pr_branch=config.pr_branch,
        commit_prefix=config.commit_prefix,
    )
    if decision.intent is Intent.SKIP:
        notice(f"Skip {event.kind}: {decision.reason}")
    else:
        print(f"  Handle {event.kind}: {decision.intent.value}")
    return decision


def run_event(
    event: Event,
    config: ReleaseConfig,
    oracle: ChangelogOracle,
    host: ReleaseHost,
) -> RunResult:
    """Execute the flow the event calls for.

    Args:
        event: The triggering event, with is_fork resolved.
        config: Effective configuration, with target_branch resolved.
        oracle: Changelog generator.
        host: GitHub operations.

    Returns:
        The values to report to CI; an empty result when nothing was done.

    Raises:
        ReleasePRError: On any fatal condition, including a detected race.
    """
    decision = classify_event(event, config)

    if decision.intent is Intent.PREPARE_PR:
        outcome = prepare_release_pr(config, oracle, host)
        return RunResult(
            result="prepared-pr",
            version=outcome.version,
            prerelease=is_prerelease(outcome.version),
            changelog=outcome.changelog,
            pr_number=outcome.pr_number,
        )

    if decision.intent is Intent.SET_VERSION:
        outcome = apply_manual_version(
            config, oracle, host, event.pr_title, event.pr_number
        )
        if outcome is None:
            return RunResult(reason=f"release PR #{event.pr_number} is no longer open")
        if outcome.action == "unchanged":
            return RunResult(
                pr_number=outcome.pr_number,
                reason=f"release PR #{outcome.pr_number} is up to date",
            )
        return RunResult(
            result="set-version",
            version=outcome.version,
            prerelease=is_prerelease(outcome.version),
            changelog=outcome.changelog,
            pr_number=outcome.pr_number,
        )

    if decision.intent is Intent.RELEASE:
        return cut_release(config, oracle, host)

    return RunResult(reason=decision.reason)
