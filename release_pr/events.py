"""Build an Event from the GitHub Actions runtime environment."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .models import Event


def load_payload(path: str | None) -> dict[str, Any]:
    """Read the webhook payload GitHub stores at GITHUB_EVENT_PATH."""
    if not path:
        return {}
    try:
        return json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read event payload {path}: {exc}") from exc


def event_from_payload(
    kind: str, payload: Mapping[str, Any], environ: Mapping[str, str]
) -> Event:
    """Extract the fields the classifier needs from an event payload.

    Args:
        kind: Event name (GITHUB_EVENT_NAME).
        payload: Parsed webhook payload.
        environ: Runtime environment with the GITHUB_* ref variables.
    """
    repository = payload.get("repository") or {}
    head_commit = payload.get("head_commit") or {}
    pull_request = payload.get("pull_request") or {}
    head_repo = (pull_request.get("head") or {}).get("repo") or {}

    message = head_commit.get("message") or ""
    number = pull_request.get("number") or payload.get("number")

    return Event(
        kind=kind,
        ref=environ.get("GITHUB_REF", ""),
        base_ref=environ.get("GITHUB_BASE_REF", ""),
        head_ref=environ.get("GITHUB_HEAD_REF", ""),
        head_commit_subject=message.splitlines()[0] if message else "",
        pr_action=payload.get("action") or "",
        pr_title_changed=bool((payload.get("changes") or {}).get("title")),
        pr_title=pull_request.get("title") or "",
        pr_number=int(number) if number else None,
        pr_head_repo=head_repo.get("full_name") or "",
        repo=environ.get("GITHUB_REPOSITORY", "") or repository.get("full_name", ""),
        is_fork=bool(repository.get("fork", False)),
        default_branch=repository.get("default_branch"),
    )


def load_event(environ: Mapping[str, str]) -> tuple[Event, bool]:
    """Load the current event.

    Returns:
        Tuple of (event, fork_known). ``fork_known`` is False when the
        payload did not say whether the repository is a fork, in which
        case the caller has to ask the host.
    """
    kind = environ.get("GITHUB_EVENT_NAME", "")
    if not kind:
        raise ConfigError("GITHUB_EVENT_NAME is not set; run inside GitHub Actions")
    payload = load_payload(environ.get("GITHUB_EVENT_PATH"))
    fork_known = "fork" in (payload.get("repository") or {})
    return event_from_payload(kind, payload, environ), fork_known
