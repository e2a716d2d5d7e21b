"""Commit classification.

The classifier works on changelog text whose entries are bullets of the form
``* <type>: <description>``. Each line is matched against ``* <type>:`` by
plain substring containment, so a line whose description happens to contain
another ``* <type>:`` sequence lands in both buckets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from reliable_changelog.config.models import VersionPolicy

# Canonical vocabulary. Bucket enumeration always follows this order.
COMMIT_TYPES: tuple[str, ...] = (
    "feat",
    "fix",
    "build",
    "docs",
    "ci",
    "perf",
    "refactor",
    "revert",
    "style",
    "test",
)


def type_token(commit_type: str) -> str:
    """Return the bullet token that marks a commit of the given type."""
    return f"* {commit_type}:"


@dataclass(frozen=True)
class CommitLine:
    """A single changelog bullet attributed to one commit type."""

    text: str
    commit_type: str

    @property
    def has_leading_token(self) -> bool:
        return self.text.startswith(type_token(self.commit_type))

    @property
    def description(self) -> str:
        """Text following the leading ``* <type>:`` token, minus one separating space.

        A line that only contains the token further along keeps its full text
        after the bullet marker.
        """
        if not self.has_leading_token:
            return self.text.removeprefix("* ").strip()
        rest = self.text[len(type_token(self.commit_type)) :]
        return rest.removeprefix(" ")

    def stripped(self) -> str:
        """Return the bullet with its leading type prefix removed.

        ``* fix: correct overflow`` becomes ``* correct overflow``. Lines
        without a leading token for this type are returned unchanged.
        """
        if not self.has_leading_token:
            return self.text
        return f"* {self.description}"


@dataclass(frozen=True)
class ClassificationAdvisory:
    """Commits were found for a type that is not included in the policy."""

    commit_type: str
    count: int

    @property
    def message(self) -> str:
        return (
            f"There were commits for {self.commit_type} but it is not included "
            f'in "included-types"'
        )

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ClassificationResult:
    """Commit lines bucketed by type, plus the major release flag.

    ``buckets`` holds one entry per included type, in canonical order, each an
    ordered tuple of lines in their original changelog order.
    """

    buckets: Mapping[str, tuple[CommitLine, ...]]
    is_major_change: bool = False
    advisories: tuple[ClassificationAdvisory, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "buckets", MappingProxyType(dict(self.buckets)))

    def lines_for(self, commit_type: str) -> tuple[CommitLine, ...]:
        return self.buckets.get(commit_type, ())

    def count(self, commit_type: str) -> int:
        return len(self.lines_for(commit_type))

    def __iter__(self) -> Iterator[str]:
        return iter(self.buckets)

    @property
    def is_empty(self) -> bool:
        return not self.is_major_change and not any(self.buckets.values())


def is_major_release_line(line: str, marker: str) -> bool:
    return f"* {marker}" in line


def classify(changelog_text: str, policy: VersionPolicy) -> ClassificationResult:
    """Bucket changelog lines by commit type.

    Args:
        changelog_text: Raw changelog text, one bullet per line
        policy: Version policy supplying the included types and major marker

    Returns:
        Frozen ClassificationResult shared by version calculation and rendering
    """
    included = set(policy.included_types)
    buckets: dict[str, list[CommitLine]] = {t: [] for t in COMMIT_TYPES if t in included}
    excluded_counts: dict[str, int] = {}
    is_major = False

    for line in changelog_text.split("\n"):
        if is_major_release_line(line, policy.major_release_commit_message):
            is_major = True
            continue

        for commit_type in COMMIT_TYPES:
            if type_token(commit_type) not in line:
                continue
            if commit_type in included:
                buckets[commit_type].append(CommitLine(line, commit_type))
            else:
                excluded_counts[commit_type] = excluded_counts.get(commit_type, 0) + 1

    advisories = tuple(
        ClassificationAdvisory(commit_type, excluded_counts[commit_type])
        for commit_type in COMMIT_TYPES
        if commit_type in excluded_counts
    )

    return ClassificationResult(
        buckets={t: tuple(lines) for t, lines in buckets.items()},
        is_major_change=is_major,
        advisories=advisories,
    )
