"""Version control integration."""

from __future__ import annotations

from reliable_changelog.vcs.git import Commit, GitRepository

__all__ = ["Commit", "GitRepository"]
