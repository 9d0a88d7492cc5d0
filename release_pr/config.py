"""Configuration for release-pr.

Settings come from (highest precedence first) CLI options, environment
variables, the ``[tool.release-pr]`` table of the repository's
pyproject.toml, and the built-in defaults. The TOML file is read with
tomlkit, the result is validated by a frozen Pydantic model.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from tomlkit.exceptions import ParseError

from .errors import ConfigError

DEFAULT_CLIFF_CONFIG_URL = (
    "https://github.com/powerman/workflows/blob/main/cliff.toml?raw=true"
)

# Environment variable → config field.
ENV_VARS = {
    "COMMIT_PREFIX": "commit_prefix",
    "PR_BRANCH": "pr_branch",
    "TARGET_BRANCH": "target_branch",
    "VERSION_CMD": "version_cmd",
    "CHANGELOG_PATH": "changelog_path",
}


class ReleaseConfig(BaseModel):
    """Effective settings for one run.

    Attributes:
        commit_prefix: Prefix distinguishing release commits and PR titles.
        pr_branch: Technical branch holding the single release commit.
        target_branch: Branch releases are cut from. None means "the
            repository's default branch", resolved at run time.
        version_cmd: Optional bash snippet run with RELEASE_PR_VERSION set,
            before the changelog is regenerated.
        changelog_path: Changelog file regenerated on every reconciliation.
        cliff_config_url: git-cliff config used when the repo has no cliff.toml.
    """

    model_config = ConfigDict(frozen=True)

    commit_prefix: str = "chore: release"
    pr_branch: str = "release-pr"
    target_branch: str | None = None
    version_cmd: str | None = None
    changelog_path: str = "CHANGELOG.md"
    cliff_config_url: str = DEFAULT_CLIFF_CONFIG_URL

    @field_validator("commit_prefix", "pr_branch", "changelog_path")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("target_branch", "version_cmd")
    @classmethod
    def _blank_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    def with_target_branch(self, target_branch: str) -> ReleaseConfig:
        return self.model_copy(update={"target_branch": target_branch})


def load_pyproject_settings(root: Path) -> dict[str, Any]:
    """Read the [tool.release-pr] table from root/pyproject.toml.

    Keys may use hyphens or underscores ("commit-prefix" or "commit_prefix").
    Returns an empty dict when the file or table is missing.
    """
    path = root / "pyproject.toml"
    if not path.exists():
        return {}
    try:
        doc = tomlkit.parse(path.read_text())
    except ParseError as exc:
        raise ConfigError(f"Invalid {path}: {exc}") from exc
    table = doc.get("tool", {}).get("release-pr", {})
    return {str(key).replace("-", "_"): value for key, value in table.items()}


def load_config(
    root: Path,
    overrides: Mapping[str, str | None] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ReleaseConfig:
    """Build the effective configuration.

    Args:
        root: Repository root holding the optional pyproject.toml.
        overrides: Values given on the command line; None entries are unset.
        environ: Environment to read variables from.

    Raises:
        ConfigError: If a value fails validation.
    """
    settings = load_pyproject_settings(root)
    if environ is not None:
        for var, field in ENV_VARS.items():
            if environ.get(var):
                settings[field] = environ[var]
    for field, value in (overrides or {}).items():
        if value is not None:
            settings[field] = value

    try:
        return ReleaseConfig(**settings)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
