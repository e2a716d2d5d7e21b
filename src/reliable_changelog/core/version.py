"""Semantic versions and next-version calculation."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from reliable_changelog.exceptions import ConfigurationError, VersionFormatError

if TYPE_CHECKING:
    from reliable_changelog.config.models import VersionPolicy
    from reliable_changelog.core.commits import ClassificationResult

VERSION_PATTERN = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A major.minor.patch version."""

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise VersionFormatError(f"Version segments must be non-negative: {self}")

    @classmethod
    def parse(cls, value: str) -> SemanticVersion:
        """Parse an ``X.Y.Z`` string.

        Raises:
            VersionFormatError: If the string is not a plain semantic version
        """
        match = VERSION_PATTERN.match(value.strip())
        if not match:
            raise VersionFormatError(f'Expected a version of the form "X.Y.Z" but got "{value}"')
        major, minor, patch = (int(group) for group in match.groups())
        return cls(major, minor, patch)

    def bump_major(self) -> SemanticVersion:
        return SemanticVersion(self.major + 1, 0, 0)

    def bump_minor(self, amount: int = 1) -> SemanticVersion:
        return SemanticVersion(self.major, self.minor + amount, 0)

    def bump_patch(self, amount: int = 1) -> SemanticVersion:
        return SemanticVersion(self.major, self.minor, self.patch + amount)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def count_changes(classification: ClassificationResult, policy: VersionPolicy) -> tuple[int, int]:
    """Count minor and patch weighted lines.

    A type listed in neither the minor nor the patch types counts as minor
    when it is ``feat`` and as patch otherwise. Lines present in several
    buckets are counted once per bucket.

    Returns:
        (minor_count, patch_count)
    """
    minor_count = 0
    patch_count = 0

    for commit_type in policy.included_types:
        matches = classification.count(commit_type)
        if commit_type in policy.minor_commit_types:
            minor_count += matches
        elif commit_type in policy.patch_commit_types:
            patch_count += matches
        elif commit_type == "feat":
            minor_count += matches
        else:
            patch_count += matches

    return minor_count, patch_count


def _check_interval(name: str, value: int) -> None:
    if value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {value}")


def compute_next_version(
    current: SemanticVersion,
    classification: ClassificationResult,
    policy: VersionPolicy,
) -> SemanticVersion:
    """Derive the next version from classified commits.

    Every ``minor_version_bump_interval`` minor commits (rounded up) advance
    the minor segment by one. Patch commits only count when no minor bump
    happens.

    Args:
        current: Version being released from
        classification: Classified changelog lines
        policy: Version policy with type weights and bump intervals

    Returns:
        The next version, equal to ``current`` when nothing qualifies

    Raises:
        ConfigurationError: If a bump interval is not positive
    """
    _check_interval("minor-version-bump-interval", policy.minor_version_bump_interval)
    _check_interval("patch-version-bump-interval", policy.patch_version_bump_interval)

    if classification.is_major_change:
        return current.bump_major()

    minor_count, patch_count = count_changes(classification, policy)

    minor_bump = math.ceil(minor_count / policy.minor_version_bump_interval)
    if minor_bump > 0:
        return current.bump_minor(minor_bump)

    patch_bump = math.ceil(patch_count / policy.patch_version_bump_interval)
    return current.bump_patch(patch_bump)
