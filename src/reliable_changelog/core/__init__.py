"""Core business logic for reliable-changelog.

This package contains the release computation pipeline:
- Commit classification by conventional-commit type
- Next-version calculation with per-type weights and bump intervals
- Changelog rendering from the same classified commits
"""

from __future__ import annotations

from reliable_changelog.core.changelog import clean_changelog, render_changelog
from reliable_changelog.core.commits import (
    COMMIT_TYPES,
    ClassificationAdvisory,
    ClassificationResult,
    CommitLine,
    classify,
)
from reliable_changelog.core.version import SemanticVersion, compute_next_version, count_changes

__all__ = [
    # Commits
    "COMMIT_TYPES",
    "ClassificationAdvisory",
    "ClassificationResult",
    "CommitLine",
    # Version
    "SemanticVersion",
    "classify",
    # Changelog
    "clean_changelog",
    "compute_next_version",
    "count_changes",
    "render_changelog",
]
