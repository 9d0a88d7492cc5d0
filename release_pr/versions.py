"""Version extraction and comparison.

Release commits and release PR titles look like ``<commit_prefix> v1.2.3``.
Versions are canonically stored with a leading ``v``; parsing and ordering
are delegated to the semver library so prerelease and build metadata
follow the semver grammar and precedence rules.
"""

from __future__ import annotations

import re

import semver

from .errors import VersionExtractionError


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string with or without a leading "v".

    Raises:
        ValueError: If the string is not a complete semver version.
    """
    return semver.Version.parse(version_str.removeprefix("v"))


def normalize(version_str: str) -> str:
    """Return the canonical "v"-prefixed form of a version.

    Examples:
        "1.2.3" → "v1.2.3"
        "v1.2.3-rc.1" → "v1.2.3-rc.1"
    """
    return f"v{parse_version(version_str)}"


def is_prerelease(version_str: str) -> bool:
    """True when the version carries a "-" pre-release segment."""
    return parse_version(version_str).prerelease is not None


def extract_version(text: str, commit_prefix: str) -> str | None:
    """Extract the version following ``commit_prefix`` at the start of text.

    The prefix must be followed by whitespace, then an optional "v" and a
    complete semver version ending at whitespace or end of text. Anything
    after that (e.g. GitHub's " (#12)" squash suffix) is ignored.

    Returns:
        The normalized version (e.g. "v1.2.3"), or None when the text does
        not match. Partial or malformed versions are never guessed at.
    """
    match = re.match(rf"{re.escape(commit_prefix)}\s+(\S+)", text)
    if not match:
        return None
    token = match.group(1)
    try:
        return normalize(token)
    except ValueError:
        return None


def require_version(text: str, commit_prefix: str) -> str:
    """Like extract_version(), but a missing version is fatal.

    Raises:
        VersionExtractionError: If no version can be extracted.
    """
    version = extract_version(text, commit_prefix)
    if version is None:
        raise VersionExtractionError(text, commit_prefix)
    return version


def resolve_version(manual: str | None, computed: str) -> str:
    """Decide between a manually set version and the computed next version.

    The manual version (from the release PR title) wins when it is a
    prerelease or is not lower than the computed one; otherwise the
    computed version wins.

    Examples:
        resolve_version("v2.0.0", "v1.1.0") → "v2.0.0"
        resolve_version("v1.0.0", "v1.1.0") → "v1.1.0"
        resolve_version("v1.0.0-rc.1", "v1.1.0") → "v1.0.0-rc.1"
    """
    computed = normalize(computed)
    if manual is None:
        return computed
    manual = normalize(manual)
    if is_prerelease(manual) or parse_version(manual) >= parse_version(computed):
        return manual
    return computed


def commit_message(commit_prefix: str, version: str) -> str:
    """Build the canonical release commit message / PR title."""
    return f"{commit_prefix} {version}"
