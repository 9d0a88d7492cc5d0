"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from release_pr.config import ReleaseConfig
from tests.fakes import FakeChangelog, FakeHost


@pytest.fixture
def config() -> ReleaseConfig:
    return ReleaseConfig(target_branch="main")


@pytest.fixture
def oracle() -> FakeChangelog:
    return FakeChangelog()


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
