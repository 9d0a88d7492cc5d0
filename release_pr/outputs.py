"""GitHub Actions step outputs and job summary."""

from __future__ import annotations

import uuid
from collections.abc import Mapping

from .config import ReleaseConfig
from .models import RunResult


def format_output(name: str, value: str) -> str:
    """Format one output entry, using heredoc syntax for multi-line values."""
    if "\n" not in value:
        return f"{name}={value}\n"
    delimiter = f"EOF_{uuid.uuid4().hex}"
    while delimiter in value:
        delimiter = f"EOF_{uuid.uuid4().hex}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(output_path: str | None, values: Mapping[str, str]) -> None:
    """Append outputs to the GITHUB_OUTPUT file, or print them without one."""
    text = "".join(format_output(name, value) for name, value in values.items())
    if not output_path:
        print(text, end="")
        return
    with open(output_path, "a") as fh:
        fh.write(text)


def result_outputs(result: RunResult) -> dict[str, str]:
    return {
        "result": result.result,
        "version": result.version,
        "prerelease": "true" if result.prerelease else "false",
        "changelog": result.changelog,
    }


def append_summary(summary_path: str | None, lines: list[str]) -> None:
    """Append Markdown lines to the job summary (GITHUB_STEP_SUMMARY)."""
    if not summary_path:
        return
    with open(summary_path, "a") as fh:
        fh.write("\n".join(lines) + "\n")


def config_summary(config: ReleaseConfig) -> list[str]:
    """Render the effective configuration as a Markdown table."""
    lines = [
        "# Release PR configuration",
        "",
        "| inputs | value |",
        "| - | - |",
    ]
    for name in ("commit_prefix", "pr_branch", "target_branch", "changelog_path"):
        lines.append(f"| {name} | `'{getattr(config, name)}'` |")
    lines.append(f"| version_cmd | {'set' if config.version_cmd else 'not set'} |")
    return lines


def result_summary(result: RunResult) -> list[str]:
    """Render the outcome of a run, including why nothing was done."""
    if not result.result:
        if result.reason:
            return ["", f"Nothing to do: {result.reason}."]
        return ["", "Nothing to do."]
    kind = "prerelease" if result.prerelease else "release"
    lines = ["", f"## {result.result}: {result.version} ({kind})", ""]
    if result.pr_number is not None:
        lines += [f"Release PR #{result.pr_number}", ""]
    if result.changelog:
        lines.append(result.changelog)
    return lines
