"""Shared fixtures for reliable-changelog tests."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from reliable_changelog.config.models import ReleaseConfig, VersionPolicy
from reliable_changelog.vcs.git import Commit, GitRepository

if TYPE_CHECKING:
    from pathlib import Path


def make_commit(sha: str, message: str) -> Commit:
    return Commit(
        sha=sha,
        message=message,
        author_name="Test",
        author_email="test@test.com",
        date=datetime(2024, 1, 1, 12, 0, 0),
    )


@pytest.fixture
def policy() -> VersionPolicy:
    """Default version policy (feat, fix, build included; intervals of 5)."""
    return VersionPolicy()


@pytest.fixture
def sample_changelog() -> str:
    """Changelog text in the shape produced by the history provider."""
    return "\n".join(
        [
            "## Unreleased (2024-01-01)",
            "",
            "* feat: add user authentication",
            "* fix: handle null response",
            "* docs: update readme",
            "* feat: support dark mode",
            "* build: pin toolchain",
            "* chore: tidy up",
        ]
    )


@pytest.fixture
def sample_commits() -> list[Commit]:
    """Commits as returned by GitRepository.get_commits (newest first)."""
    return [
        make_commit("a1", "feat: add user authentication"),
        make_commit("b2", "fix(core): handle null response\n\nLonger body text."),
        make_commit("c3", "docs: update readme"),
        make_commit("d4", "Merge branch 'main' into feature"),
        make_commit("e5", "Updated the build script"),
    ]


@pytest.fixture
def mock_repo(tmp_path: Path) -> MagicMock:
    """Create a mock GitRepository with no tags and no commits."""
    repo = MagicMock(spec=GitRepository)
    repo.path = tmp_path
    repo.get_tags.return_value = []
    repo.get_commits.return_value = []
    return repo


@pytest.fixture
def package_json(tmp_path: Path) -> Path:
    """A package.json holding version 1.2.3."""
    path = tmp_path / "package.json"
    path.write_text('{\n  "name": "demo",\n  "version": "1.2.3"\n}\n')
    return path


@pytest.fixture
def release_config() -> ReleaseConfig:
    return ReleaseConfig()
