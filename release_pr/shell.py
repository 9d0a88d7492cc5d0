"""Shell, git and gh utilities.

Provides simple wrappers around subprocess calls for running git, gh and
user-supplied shell commands, plus output helpers that speak the GitHub
Actions workflow-command syntax (::notice::, ::group::, ...).
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from .errors import ExternalCallError


def _call(
    cmd: list[str], *, check: bool, env: Mapping[str, str] | None = None
) -> str:
    result = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        check=False,
        env=dict(env) if env is not None else None,
    )
    if check and result.returncode != 0:
        raise ExternalCallError(cmd, result.returncode, result.stderr)
    return result.stdout.strip()


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "log", "-1").
        check: If True (default), raise ExternalCallError on non-zero exit.
               Set to False for commands that may legitimately fail
               (e.g., fetching a branch that does not exist yet).

    Returns:
        Stripped stdout from the git command.
    """
    return _call(["git", *args], check=check)


def gh(*args: str, check: bool = True) -> str:
    """Run a GitHub CLI command and return stdout.

    Same contract as git(); the token is taken from GITHUB_TOKEN/GH_TOKEN
    in the inherited environment.
    """
    return _call(["gh", *args], check=check)


def run_tool(
    *args: str, env: Mapping[str, str] | None = None, check: bool = True
) -> str:
    """Run an arbitrary tool (e.g., git-cliff) with extra environment values."""
    full_env = {**os.environ, **env} if env else None
    return _call(list(args), check=check, env=full_env)


def run_script(script: str, env: Mapping[str, str]) -> None:
    """Run a user-supplied bash snippet with strict error handling.

    Output streams directly to the terminal so the job log shows it.

    Raises:
        ExternalCallError: If the script exits non-zero.
    """
    cmd = ["bash", "-e", "-o", "pipefail", "-c", script]
    result = subprocess.run(cmd, env={**os.environ, **env}, check=False)
    if result.returncode != 0:
        raise ExternalCallError(cmd, result.returncode, "")


def committed_file(path: str, rev: str = "HEAD") -> bytes | None:
    """Return the raw bytes of ``path`` as committed at ``rev``, or None."""
    result = subprocess.run(["git", "show", f"{rev}:{path}"], capture_output=True)
    if result.returncode != 0:
        return None
    return result.stdout


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of a run in the job log.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def notice(msg: str) -> None:
    print(f"::notice::{msg}")


def warning(msg: str) -> None:
    print(f"::warning::{msg}")


def error(msg: str) -> None:
    print(f"::error::{msg}")


@contextmanager
def group(title: str) -> Iterator[None]:
    """Fold everything printed inside the block into a collapsible log group."""
    print(f"::group::{title}", flush=True)
    try:
        yield
    finally:
        print("::endgroup::", flush=True)
