"""Cutting a release after the release PR was merged.

Race condition handling:

1. Extract the version from the merged PR title (merge commit) or from the
   pushed commit itself (squash or rebase merge).
2. Regenerate the changelog file for that version.
3. If it differs from the committed file, one of these happened:
   - the version in the release PR title was changed and the PR merged
     before the release branch was updated;
   - a significant commit landed on the target branch and the PR was
     merged before the release branch was updated.
4. On a race, a release PR reflecting the real history is created or
   refreshed instead, and the run fails so nothing gets published.
   Otherwise the tag and a draft release are created.
"""

from __future__ import annotations

from pathlib import Path

from .branch import prepare_release_pr
from .changelog import ChangelogOracle
from .classify import merged_pr_number
from .config import ReleaseConfig
from .errors import RaceDetectedError
from .github import ReleaseHost
from .models import RunResult
from .shell import committed_file, git, group, notice, step, warning
from .versions import is_prerelease, require_version


def release_message(config: ReleaseConfig, host: ReleaseHost) -> str:
    """Return the text carrying the released version.

    For a merge commit that is the merged PR's title; for squash and rebase
    merges it is the head commit subject itself.
    """
    subject = git("log", "-1", "--pretty=format:%s")
    number = merged_pr_number(subject, config.pr_branch)
    if number is not None:
        return host.pr_title(number)
    return subject


def changelog_matches_committed(path: str) -> bool:
    """Compare the changelog on disk with the committed one, byte for byte.

    A changelog that is not committed at all never matches.
    """
    committed = committed_file(path)
    file = Path(path)
    if committed is None or not file.exists():
        return False
    return file.read_bytes() == committed


def finalize(
    host: ReleaseHost, version: str, changelog: str, prerelease: bool
) -> None:
    """Tag the current commit and publish a draft release for it."""
    step(f"Releasing {version}")

    git("tag", version, "-m", changelog or version)
    git("push", "origin", version)
    print(f"  tag {version}")

    host.create_release(version, changelog, prerelease)
    notice(f"Created draft release {version}")


def cut_release(
    config: ReleaseConfig, oracle: ChangelogOracle, host: ReleaseHost
) -> RunResult:
    """Release the merged release PR, unless history moved on meanwhile.

    Raises:
        VersionExtractionError: If no version can be found.
        RaceDetectedError: If the changelog no longer matches; a release PR
            reflecting the current history exists afterwards.
    """
    step("Extracting release version")

    message = release_message(config, host)
    version = require_version(message, config.commit_prefix)
    prerelease = is_prerelease(version)
    changelog = oracle.render(version)
    print(f"  {version}{' (prerelease)' if prerelease else ''}")

    step("Checking for race condition")

    oracle.write(version, config.changelog_path)
    if not changelog_matches_committed(config.changelog_path):
        warning(
            f"Race condition detected - {config.changelog_path} differs "
            "from expected state"
        )
        with group(f"{config.changelog_path} diff"):
            print(git("diff", "--", config.changelog_path, check=False))
        git("reset", "--hard")

        outcome = prepare_release_pr(config, oracle, host, fallback_version=version)
        raise RaceDetectedError(version, outcome.pr_number)

    notice("No race condition detected - proceeding with release")
    finalize(host, version, changelog, prerelease)
    return RunResult(
        result="released", version=version, prerelease=prerelease, changelog=changelog
    )
