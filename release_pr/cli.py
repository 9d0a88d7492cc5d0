"""CLI entry point for release-pr."""

from __future__ import annotations

import functools
import os
from collections.abc import Callable
from importlib.metadata import version as pkg_version
from pathlib import Path
from typing import Any, NoReturn

import click

from .changelog import GitCliff
from .config import ReleaseConfig, load_config
from .errors import RaceDetectedError, ReleasePRError
from .events import load_event
from .github import GitHub
from .models import Intent
from .outputs import (
    append_summary,
    config_summary,
    result_outputs,
    result_summary,
    write_outputs,
)
from .pipeline import classify_event, resolve_context, run_event
from .shell import error, warning
from .versions import is_prerelease, normalize

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _version_range() -> str:
    """Compute pip version range: >=current,<next_minor."""
    v = pkg_version("release-pr")
    major, minor, *_ = v.split(".")
    return f'"release-pr>={v},<{major}.{int(minor) + 1}.0"'


def _fatal(exc: Exception) -> NoReturn:
    """Report a fatal condition as a workflow error and exit 1."""
    error(str(exc))
    append_summary(os.environ.get("GITHUB_STEP_SUMMARY"), ["", f"**Error:** {exc}"])
    raise SystemExit(1) from exc


def config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the configuration options shared by run and classify."""
    options = [
        click.option("--commit-prefix", help="Release commit/PR title prefix."),
        click.option("--pr-branch", help="Technical branch for the release PR."),
        click.option(
            "--target-branch", help="Branch to release from (default: repo default)."
        ),
        click.option(
            "--version-cmd",
            help="Shell command updating extra files using $RELEASE_PR_VERSION.",
        ),
        click.option("--changelog-path", help="Changelog file to regenerate."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_config(overrides: dict[str, str | None]) -> ReleaseConfig:
    return load_config(Path.cwd(), overrides, os.environ)


def _with_errors(func: Callable[..., None]) -> Callable[..., None]:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        try:
            func(*args, **kwargs)
        except RaceDetectedError as exc:
            warning(str(exc))
            append_summary(os.environ.get("GITHUB_STEP_SUMMARY"), ["", str(exc)])
            raise SystemExit(1) from exc
        except ReleasePRError as exc:
            _fatal(exc)

    return wrapper


@click.group()
@click.version_option(package_name="release-pr")
def cli() -> None:
    """Release PR automation: one pull request mirrors the next release."""


@cli.command()
@click.option(
    "--workflow-dir",
    type=click.Path(),
    default=".github/workflows",
    show_default=True,
    help="Directory to write the workflow file.",
)
def init(workflow_dir: str) -> None:
    """Scaffold the GitHub Actions workflow into your repo."""
    root = Path.cwd()

    if not (root / ".git").exists():
        raise click.ClickException("Not a git repository. Run from the repo root.")

    dest_dir = root / workflow_dir
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / "release.yml"

    template = TEMPLATES_DIR / "release.yml"
    rendered = template.read_text().replace("__RELEASE_PR_VERSION__", _version_range())
    dest.write_text(rendered)

    click.echo(f"✓ Wrote workflow to {dest.relative_to(root)}")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Commit and push the workflow file")
    click.echo("  2. Optionally add a RELEASE_TOKEN secret so release PRs run CI")
    click.echo("  3. Push a conventional commit, e.g. 'feat: add something'")


@cli.command()
@config_options
@_with_errors
def run(**overrides: str | None) -> None:
    """Handle the current GitHub Actions event (usually called from CI)."""
    host = GitHub()
    config = _load_config(overrides)
    event, fork_known = load_event(os.environ)
    event, config = resolve_context(event, fork_known, config, host)
    append_summary(os.environ.get("GITHUB_STEP_SUMMARY"), config_summary(config))

    oracle = GitCliff(Path.cwd(), config.cliff_config_url, event.repo)
    result = run_event(event, config, oracle, host)

    write_outputs(os.environ.get("GITHUB_OUTPUT"), result_outputs(result))
    append_summary(os.environ.get("GITHUB_STEP_SUMMARY"), result_summary(result))


@cli.command()
@config_options
@_with_errors
def classify(**overrides: str | None) -> None:
    """Print what the current event would do, without side effects."""
    host = GitHub()
    config = _load_config(overrides)
    event, fork_known = load_event(os.environ)
    event, config = resolve_context(event, fork_known, config, host)

    decision = classify_event(event, config)
    action = "" if decision.intent is Intent.SKIP else decision.intent.value
    write_outputs(os.environ.get("GITHUB_OUTPUT"), {"action": action})


@cli.command()
@click.option("--version", "version_str", required=True, help="Released tag.")
@click.option("--changelog", default=None, help="Release notes to set.")
@click.option(
    "--prerelease/--no-prerelease",
    default=None,
    help="Override the prerelease flag (default: derived from the version).",
)
@_with_errors
def publish(version_str: str, changelog: str | None, prerelease: bool | None) -> None:
    """Publish the draft release created by `run` (finalize step)."""
    try:
        version = normalize(version_str)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--version") from exc
    if prerelease is None:
        prerelease = is_prerelease(version)

    GitHub().publish_release(version, changelog, prerelease)
    click.echo(f"✓ Published {version}{' (prerelease)' if prerelease else ''}")
